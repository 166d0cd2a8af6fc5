"""
Adduct library and m/z <-> neutral mass arithmetic.

Every adduct label maps to a signed offset (delta) that, added to an observed
m/z, strips the adduct chemistry from one charge. Protonated and cationised
species therefore carry negative deltas, deprotonated species positive ones.
Multiply charged labels store the per-charge offset (total adduct mass / z).
"""

import logging
import math
import re
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from lipidadduct.exceptions import UnknownAdductError

logger = logging.getLogger(__name__)

PROTON_MASS = 1.007276  # Mass of H+
H2O_MASS = 18.010565


class IonizationMode(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @classmethod
    def parse(cls, value) -> "IonizationMode":
        """Accept an IonizationMode, 'positive'/'negative' (any case) or '+'/'-'"""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("positive", "pos", "+"):
            return cls.POSITIVE
        if text in ("negative", "neg", "-"):
            return cls.NEGATIVE
        raise ValueError(
            f"Unknown ionization mode '{value}'. Valid modes are: positive, negative"
        )


# ============================================================================
# ADDUCT LIBRARY
# ============================================================================

# Insertion order is the enumeration order used by adduct detection.
_POSITIVE_ADDUCTS: Dict[str, float] = {
    "[M+H]+": -PROTON_MASS,
    "[M+Na]+": -22.989218,
    "[M+K]+": -38.963158,
    "[M+NH4]+": -18.033823,
    "[M+H-H2O]+": H2O_MASS - PROTON_MASS,
    "[M+H+NH4]2+": -9.520550,
    "[M+H+Na]2+": -11.998247,
    "[M+2H]2+": -PROTON_MASS,
    "[M+3H]3+": -PROTON_MASS,
    "[M+2H+Na]3+": -8.334590,
    "[2M+H]+": -PROTON_MASS,
    "[2M+Na]+": -22.989218,
    "[2M+NH4]+": -18.033823,
    "[2M+3H]3+": -PROTON_MASS,
}

_NEGATIVE_ADDUCTS: Dict[str, float] = {
    "[M-H]-": PROTON_MASS,
    "[M+Cl]-": -34.969402,
    "[M+HCOO]-": -44.998201,
    "[M+CH3COO]-": -59.013851,
    "[M-H-H2O]-": H2O_MASS + PROTON_MASS,
    "[M+Na-2H]-": -20.974666,
    "[M-2H]2-": PROTON_MASS,
    "[M-3H]3-": PROTON_MASS,
    "[2M-H]-": PROTON_MASS,
    "[2M+HCOO]-": -44.998201,
    "[3M-H]-": PROTON_MASS,
}

POSITIVE_ADDUCTS: Mapping[str, float] = MappingProxyType(_POSITIVE_ADDUCTS)
NEGATIVE_ADDUCTS: Mapping[str, float] = MappingProxyType(_NEGATIVE_ADDUCTS)

_ADDUCT_TABLES = {
    IonizationMode.POSITIVE: POSITIVE_ADDUCTS,
    IonizationMode.NEGATIVE: NEGATIVE_ADDUCTS,
}

_LABELS = {
    mode: tuple(table.keys()) for mode, table in _ADDUCT_TABLES.items()
}


def labels_for(ionization_mode) -> Tuple[str, ...]:
    """Adduct labels registered for a polarity, in library order"""
    return _LABELS[IonizationMode.parse(ionization_mode)]


def canonical_label(adduct: str) -> str:
    """Drop an explicit multimer or charge of 1, e.g. '[1M+H]1+' -> '[M+H]+'"""
    return UNIT_CHARGE_RE.sub(r"]\1", UNIT_MULTIMER_RE.sub("[M", adduct.strip()))


def find_adduct_mass(adduct: str) -> Optional[float]:
    """Return the registered delta for *adduct*, searching positive then negative."""
    adduct = canonical_label(adduct)
    for table in (POSITIVE_ADDUCTS, NEGATIVE_ADDUCTS):
        if adduct in table:
            return table[adduct]
    return None


def lookup(adduct: str) -> Tuple[float, IonizationMode]:
    """
    Return (delta, polarity) for a registered adduct label.

    Raises:
        UnknownAdductError: If the label is in neither polarity table
    """
    label = canonical_label(adduct)
    for mode, table in _ADDUCT_TABLES.items():
        if label in table:
            return table[label], mode
    raise UnknownAdductError(adduct)


# ============================================================================
# LABEL PARSING
# ============================================================================

MULTIMER_RE = re.compile(r"(\d+)M")
CHARGE_RE = re.compile(r"(\d+)([+\-]$)")
UNIT_MULTIMER_RE = re.compile(r"\[1M")
UNIT_CHARGE_RE = re.compile(r"\]1([+\-])$")


def extract_multimer(adduct: str) -> int:
    """Number of molecules in the ion, e.g. 2 for '[2M+H]+' (default 1)"""
    match = MULTIMER_RE.search(adduct)
    return int(match.group(1)) if match else 1


def extract_charge(adduct: str) -> int:
    """Charge magnitude, e.g. 2 for '[M+2H]2+' (default 1)"""
    match = CHARGE_RE.search(adduct)
    return int(match.group(1)) if match else 1


# ============================================================================
# MASS ARITHMETIC
# ============================================================================

def neutral_mass_from_mz(mz: float, adduct: str) -> float:
    """
    Monoisotopic mass M implied by observing *mz* as *adduct*.

    M = (mz + delta) * charge / multimer

    Labels missing from the library are treated as delta = 0.

    Example: neutral_mass_from_mz(700.500, '[M+H]+') -> 699.492724
    """
    multimer = extract_multimer(adduct)
    charge = extract_charge(adduct)
    adduct_mass = find_adduct_mass(adduct)
    if adduct_mass is None:
        logger.debug(f"Adduct {adduct} not in library, using delta = 0")
        adduct_mass = 0.0
    return (mz + adduct_mass) * charge / multimer


def mz_from_neutral_mass(monoisotopic_mass: float, adduct: str) -> float:
    """
    m/z at which a molecule of mass *monoisotopic_mass* appears as *adduct*.

    Single charge (any multimer):  mz = M - delta
    Multimer, multiple charge:     mz = M * multimer - delta
    Monomer, multiple charge:      mz = M / charge - delta

    Raises:
        UnknownAdductError: If the label is not in the library
    """
    multimer = extract_multimer(adduct)
    charge = extract_charge(adduct)
    adduct_mass = find_adduct_mass(adduct)
    if adduct_mass is None:
        raise UnknownAdductError(adduct)

    if charge == 1:
        return monoisotopic_mass - adduct_mass
    elif multimer > 1:
        return monoisotopic_mass * multimer - adduct_mass
    else:
        return monoisotopic_mass / charge - adduct_mass


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def ppm_error(observed: float, theoretical: float) -> int:
    """Absolute ppm difference between a measured and a theoretical mass"""
    return _round_half_up(abs((observed - theoretical) * 1_000_000 / theoretical))


def delta_for_ppm(mass: float, ppm: int) -> float:
    """
    ppm tolerance expressed in Da, rounded to the nearest whole Dalton.

    Use ppm_window() for an unrounded m/z window.
    """
    return float(_round_half_up(abs(mass * ppm) / 1_000_000))


def ppm_window(mass: float, ppm: float) -> float:
    """Absolute m/z window (Da) equivalent to *ppm* at *mass*"""
    return abs(mass * ppm) / 1_000_000
