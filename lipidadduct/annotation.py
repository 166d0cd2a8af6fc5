"""
Annotation data model and adduct detection from grouped signals.

An annotation links a target peak to a candidate lipid. Peaks that co-elute
with the target (the grouped signals) are used to decide which adduct the
target peak is: a hypothesis is accepted as soon as another peak in the group
lands on the m/z predicted for the same neutral mass under some adduct.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from lipidadduct.adducts import (
    IonizationMode,
    labels_for,
    mz_from_neutral_mass,
    neutral_mass_from_mz,
)

logger = logging.getLogger(__name__)

UNKNOWN_ADDUCT = "Unknown"


@dataclass(frozen=True, order=True)
class Peak:
    """A centroided signal; peaks compare and hash by m/z only"""
    mz: float
    intensity: float = field(default=0.0, compare=False)

    def __post_init__(self):
        if self.mz <= 0:
            raise ValueError(f"Peak m/z must be positive, got {self.mz}")
        if self.intensity < 0:
            raise ValueError(f"Peak intensity must be non-negative, got {self.intensity}")


@dataclass(frozen=True)
class Lipid:
    """Candidate lipid; identity is the database id"""
    lipid_id: int
    name: str = field(default="", compare=False)
    formula: str = field(default="", compare=False)
    lipid_class: str = field(default="", compare=False)
    carbon_count: int = field(default=0, compare=False)
    double_bonds_count: int = field(default=0, compare=False)


def sort_signals(peaks: Iterable[Peak]) -> Tuple[Peak, ...]:
    """Sort peaks by m/z and drop later peaks whose m/z was already seen"""
    unique = {}
    for peak in peaks:
        unique.setdefault(peak.mz, peak)
    return tuple(sorted(unique.values()))


class Annotation:
    """Annotation of a lipid over a target peak and its co-eluting signals"""

    def __init__(self, lipid: Lipid, mz: float, intensity: float, rt_min: float,
                 ionization_mode: IonizationMode,
                 grouped_signals: Optional[Iterable[Peak]] = None):
        if mz <= 0:
            raise ValueError(f"Annotation m/z must be positive, got {mz}")
        if rt_min < 0:
            raise ValueError(f"Retention time must be non-negative, got {rt_min}")

        self._lipid = lipid
        self._mz = float(mz)
        self._intensity = float(intensity)
        self._rt_min = float(rt_min)
        self._ionization_mode = IonizationMode.parse(ionization_mode)
        self._grouped_signals = sort_signals(grouped_signals or ())

        self.adduct: Optional[str] = None
        self.score = 0
        self.total_scores_applied = 0

    @property
    def lipid(self) -> Lipid:
        return self._lipid

    @property
    def mz(self) -> float:
        return self._mz

    @property
    def intensity(self) -> float:
        return self._intensity

    @property
    def rt_min(self) -> float:
        return self._rt_min

    @property
    def ionization_mode(self) -> IonizationMode:
        return self._ionization_mode

    @property
    def grouped_signals(self) -> Tuple[Peak, ...]:
        return self._grouped_signals

    # ========== Scoring ==========

    def add_score(self, delta: int):
        self.score += delta
        self.total_scores_applied += 1

    @property
    def normalized_score(self) -> float:
        """Mean score per applied rule; NaN until a rule has been applied"""
        if self.total_scores_applied == 0:
            return math.nan
        return self.score / self.total_scores_applied

    # ========== Adduct detection ==========

    def detect_adduct_from_signals(self, ionization_mode, mz_tolerance: float) -> str:
        """
        Detect the adduct of the target peak from the grouped signals.

        Every library adduct A is tried as the identity of the target peak.
        The neutral mass implied by A is projected through every adduct B and
        compared with each other grouped peak; the first A for which some
        peak matches within *mz_tolerance* (Da) is returned. Peaks within
        *mz_tolerance* of the target are the target itself and are skipped.

        Returns:
            The adduct label, or UNKNOWN_ADDUCT when fewer than two signals
            are grouped or no hypothesis is corroborated
        """
        if mz_tolerance < 0:
            raise ValueError(f"m/z tolerance must be non-negative, got {mz_tolerance}")

        if len(self._grouped_signals) < 2:
            logger.debug(
                f"detect adduct: not enough signals ({len(self._grouped_signals)}) "
                f"for m/z {self._mz}"
            )
            return UNKNOWN_ADDUCT

        adducts = labels_for(ionization_mode)

        for adduct in adducts:
            monoisotopic_mass = neutral_mass_from_mz(self._mz, adduct)
            logger.debug(f"Trying {adduct} for m/z {self._mz}: M = {monoisotopic_mass:.6f}")

            for peak in self._grouped_signals:
                if abs(peak.mz - self._mz) <= mz_tolerance:
                    continue

                for peak_adduct in adducts:
                    expected_mz = mz_from_neutral_mass(monoisotopic_mass, peak_adduct)
                    if abs(expected_mz - peak.mz) <= mz_tolerance:
                        logger.info(
                            f"Detected {adduct} for m/z {self._mz} "
                            f"(via {peak_adduct} at m/z {peak.mz})"
                        )
                        return adduct

        logger.debug(f"No adduct corroborated for m/z {self._mz}")
        return UNKNOWN_ADDUCT

    def assign_adduct(self, ionization_mode=None, mz_tolerance: float = 0.01) -> str:
        """Detect the adduct and store it; defaults to the annotation's own mode"""
        mode = self._ionization_mode if ionization_mode is None else ionization_mode
        self.adduct = self.detect_adduct_from_signals(mode, mz_tolerance)
        return self.adduct

    # ========== Identity ==========

    def __eq__(self, other):
        if self is other:
            return True
        if not isinstance(other, Annotation):
            return NotImplemented
        return (self._lipid == other._lipid
                and self._mz == other._mz
                and self._rt_min == other._rt_min)

    def __hash__(self):
        return hash((self._lipid, self._mz, self._rt_min))

    def __repr__(self):
        return (f"Annotation({self._lipid.name}, mz={self._mz:.4f}, RT={self._rt_min:.2f}, "
                f"adduct={self.adduct}, intensity={self._intensity:.1f}, score={self.score})")


def detect_adduct(annotation: Annotation, ionization_mode, mz_tolerance: float) -> str:
    """Function form of Annotation.detect_adduct_from_signals"""
    return annotation.detect_adduct_from_signals(ionization_mode, mz_tolerance)
