"""Tests for the lipidadduct command line."""

import json

import pandas as pd
import pytest

from lipidadduct.cli import build_parser, main


def test_mass_command(capsys):
    assert main(["mass", "700.5", "[M+H]+"]) == 0
    assert capsys.readouterr().out.strip() == "699.492724"


def test_mz_command(capsys):
    assert main(["mz", "699.492724", "[M+Na]+"]) == 0
    assert capsys.readouterr().out.strip() == "722.481942"


def test_mz_command_unknown_adduct(capsys):
    assert main(["mz", "699.49", "[M+Xe]+"]) == 2
    assert capsys.readouterr().out == ""


def test_adducts_command(capsys):
    assert main(["adducts", "--mode", "negative"]) == 0
    out = capsys.readouterr().out
    assert "[M-H]-" in out
    assert "[M+H]+" not in out


def test_detect_command(tmp_path, capsys):
    source = tmp_path / "peaks.csv"
    output = tmp_path / "result.csv"
    pd.DataFrame({"group": [1, 1], "mz": [700.500, 722.482]}).to_csv(source, index=False)

    assert main(["detect", str(source), "-o", str(output), "--tolerance", "0.01"]) == 0

    result = pd.read_csv(output)
    assert list(result["adduct"]) == ["[M+H]+", "[M+Na]+"]
    assert "Saved to" in capsys.readouterr().out


def test_detect_uses_config_defaults(tmp_path, isolated_config):
    isolated_config.write_text(json.dumps({"ionization_mode": "negative", "ppm_tolerance": 10}))
    source = tmp_path / "peaks.csv"
    output = tmp_path / "result.csv"
    pd.DataFrame({"mz": [698.4854, 744.4909]}).to_csv(source, index=False)

    assert main(["detect", str(source), "-o", str(output)]) == 0
    assert list(pd.read_csv(output)["adduct"]) == ["[M-H]-", "[M+HCOO]-"]


def test_detect_uses_config_mz_tolerance(tmp_path, isolated_config, capsys):
    isolated_config.write_text(json.dumps({"mz_tolerance": 0.00001}))
    source = tmp_path / "peaks.csv"
    output = tmp_path / "result.csv"
    pd.DataFrame({"mz": [700.500, 722.482]}).to_csv(source, index=False)

    assert main(["detect", str(source), "-o", str(output)]) == 0
    assert list(pd.read_csv(output)["adduct"]) == ["Unknown", "Unknown"]
    assert "Tolerance: 1e-05 Da" in capsys.readouterr().out


def test_detect_missing_input(tmp_path):
    assert main(["detect", str(tmp_path / "missing.csv")]) == 2


def test_tolerance_options_are_exclusive():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["detect", "peaks.csv", "--tolerance", "0.01", "--ppm", "5"])
