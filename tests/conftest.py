import pytest

from lipidadduct.annotation import Lipid


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config manager at a per-test file that does not exist yet."""
    path = tmp_path / "lipidadduct_config.json"
    monkeypatch.setenv("LIPIDADDUCT_CONFIG", str(path))
    return path


@pytest.fixture
def pc_34_1():
    return Lipid(1, "PC 34:1", "C42H82NO8P", "PC", 34, 1)


@pytest.fixture
def tg_54_3():
    return Lipid(3, "TG 54:3", "C57H104O6", "TG", 54, 3)
