"""Adduct detection over peak tables"""

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from lipidadduct.adducts import IonizationMode, neutral_mass_from_mz, ppm_window
from lipidadduct.annotation import UNKNOWN_ADDUCT, Annotation, Lipid, Peak

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['mz']


def load_peak_table(path: Union[str, Path]) -> pd.DataFrame:
    """Read a peak table CSV (one row per peak)."""
    df = pd.read_csv(path)
    df.rename(columns=lambda c: str(c).lstrip('\ufeff').strip(), inplace=True)
    return df


def save_peak_table(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output, index=False)
    return output


def detect_adducts_table(peaks: pd.DataFrame, ionization_mode,
                         mz_tolerance: float = 0.01,
                         ppm_tolerance: Optional[float] = None,
                         group_column: str = 'group') -> pd.DataFrame:
    """
    Detect the adduct of every peak from the peaks sharing its group.

    Columns:
        mz (required), intensity, rt_min, lipid and *group_column* (optional).
        Without a group column the whole table is one group. Rows with a
        missing group value form a group of their own.

    Each row is annotated as the target with all peaks of its group as the
    grouped signals. When *ppm_tolerance* is given it replaces *mz_tolerance*
    with a window computed at each target m/z.

    Returns:
        Copy of *peaks* with 'adduct' and 'neutral_mass' columns added
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in peaks.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")

    mode = IonizationMode.parse(ionization_mode)
    df = peaks.copy()

    if group_column in df.columns:
        groups = df.groupby(group_column, sort=False, dropna=False)
    else:
        groups = [(None, df)]

    adducts = pd.Series(UNKNOWN_ADDUCT, index=df.index, dtype=object)
    neutral_masses = pd.Series(float('nan'), index=df.index, dtype=float)

    for group_name, group in groups:
        intensities = group['intensity'] if 'intensity' in group.columns else [0.0] * len(group)
        signals = [Peak(float(mz), float(intensity))
                   for mz, intensity in zip(group['mz'], intensities)]

        for row_index, row in group.iterrows():
            target_mz = float(row['mz'])
            tolerance = (ppm_window(target_mz, ppm_tolerance)
                         if ppm_tolerance is not None else mz_tolerance)
            lipid = Lipid(lipid_id=row_index, name=str(row.get('lipid', '')))
            annotation = Annotation(lipid, target_mz,
                                    float(row.get('intensity', 0.0)),
                                    float(row.get('rt_min', 0.0)),
                                    mode, signals)
            adduct = annotation.assign_adduct(mode, tolerance)
            adducts.at[row_index] = adduct
            if adduct != UNKNOWN_ADDUCT:
                neutral_masses.at[row_index] = neutral_mass_from_mz(target_mz, adduct)

        logger.debug(f"Group {group_name}: {len(group)} peaks processed")

    df['adduct'] = adducts
    df['neutral_mass'] = neutral_masses

    detected = int((adducts != UNKNOWN_ADDUCT).sum())
    logger.info(f"Detected adducts for {detected} of {len(df)} peaks ({mode.value} mode)")
    return df
