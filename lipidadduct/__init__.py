"""Lipid adduct detection from co-eluting LC-MS signals."""

__license__ = "MIT"
__version__ = "1.0.0"

from lipidadduct.adducts import (
    NEGATIVE_ADDUCTS,
    POSITIVE_ADDUCTS,
    IonizationMode,
    delta_for_ppm,
    labels_for,
    lookup,
    mz_from_neutral_mass,
    neutral_mass_from_mz,
    ppm_error,
    ppm_window,
)
from lipidadduct.annotation import UNKNOWN_ADDUCT, Annotation, Lipid, Peak, detect_adduct
from lipidadduct.exceptions import LipidAdductError, UnknownAdductError

__all__ = [
    "NEGATIVE_ADDUCTS",
    "POSITIVE_ADDUCTS",
    "UNKNOWN_ADDUCT",
    "Annotation",
    "IonizationMode",
    "Lipid",
    "LipidAdductError",
    "Peak",
    "UnknownAdductError",
    "delta_for_ppm",
    "detect_adduct",
    "labels_for",
    "lookup",
    "mz_from_neutral_mass",
    "neutral_mass_from_mz",
    "ppm_error",
    "ppm_window",
]
