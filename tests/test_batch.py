"""
Tests for table-level adduct detection.
"""

import math

import pandas as pd
import pytest

from lipidadduct.annotation import UNKNOWN_ADDUCT
from lipidadduct.batch import detect_adducts_table, load_peak_table, save_peak_table


@pytest.fixture
def peak_table():
    """Two co-elution groups: PC 34:1 [M+H]+/[M+Na]+ and an isolated peak."""
    return pd.DataFrame({
        "group": [1, 1, 2],
        "lipid": ["PC 34:1", "PC 34:1", "TG 54:3"],
        "mz": [700.500, 722.482, 500.000],
        "intensity": [80000.0, 100000.0, 5000.0],
        "rt_min": [6.5, 6.5, 10.0],
    })


def test_detect_adducts_by_group(peak_table):
    result = detect_adducts_table(peak_table, "positive", mz_tolerance=0.01)

    assert list(result["adduct"]) == ["[M+H]+", "[M+Na]+", UNKNOWN_ADDUCT]
    assert result.loc[0, "neutral_mass"] == pytest.approx(699.492724, abs=1e-6)
    assert result.loc[1, "neutral_mass"] == pytest.approx(699.492782, abs=1e-6)
    assert math.isnan(result.loc[2, "neutral_mass"])


def test_input_table_is_not_modified(peak_table):
    original = peak_table.copy()
    result = detect_adducts_table(peak_table, "positive")
    pd.testing.assert_frame_equal(peak_table, original)
    assert list(result.columns) == list(original.columns) + ["adduct", "neutral_mass"]


def test_without_group_column_table_is_one_group():
    peaks = pd.DataFrame({"mz": [700.500, 722.482]})
    result = detect_adducts_table(peaks, "positive", mz_tolerance=0.01)
    assert list(result["adduct"]) == ["[M+H]+", "[M+Na]+"]


def test_groups_do_not_corroborate_each_other():
    peaks = pd.DataFrame({"group": ["a", "b"], "mz": [700.500, 722.482]})
    result = detect_adducts_table(peaks, "positive", mz_tolerance=0.01)
    assert list(result["adduct"]) == [UNKNOWN_ADDUCT, UNKNOWN_ADDUCT]


def test_rows_without_group_form_their_own_group():
    peaks = pd.DataFrame({"group": [float("nan"), float("nan"), 1.0],
                          "mz": [700.500, 722.482, 500.000]})
    result = detect_adducts_table(peaks, "positive", mz_tolerance=0.01)
    assert len(result) == 3
    assert list(result["adduct"]) == ["[M+H]+", "[M+Na]+", UNKNOWN_ADDUCT]


def test_ppm_tolerance(peak_table):
    result = detect_adducts_table(peak_table, "positive", ppm_tolerance=10)
    assert list(result["adduct"]) == ["[M+H]+", "[M+Na]+", UNKNOWN_ADDUCT]


def test_negative_mode():
    peaks = pd.DataFrame({"mz": [698.4854, 744.4909], "intensity": [90000.0, 40000.0]})
    result = detect_adducts_table(peaks, "negative", mz_tolerance=0.01)
    assert list(result["adduct"]) == ["[M-H]-", "[M+HCOO]-"]


def test_custom_group_column():
    peaks = pd.DataFrame({"feature": [7, 7], "mz": [700.500, 350.754]})
    result = detect_adducts_table(peaks, "positive", group_column="feature")
    assert result.loc[0, "adduct"] == "[M+H]+"


def test_missing_mz_column():
    with pytest.raises(ValueError, match="Missing required columns"):
        detect_adducts_table(pd.DataFrame({"intensity": [1.0]}), "positive")


def test_save_and_load_peak_table(tmp_path, peak_table):
    path = save_peak_table(peak_table, tmp_path / "out" / "peaks.csv")
    assert path.exists()

    loaded = load_peak_table(path)
    assert list(loaded.columns) == list(peak_table.columns)
    assert list(loaded["mz"]) == pytest.approx(list(peak_table["mz"]))


def test_load_strips_header_whitespace(tmp_path):
    path = tmp_path / "peaks.csv"
    path.write_text(" mz , intensity\n700.5,1\n", encoding="utf-8")
    assert list(load_peak_table(path).columns) == ["mz", "intensity"]
