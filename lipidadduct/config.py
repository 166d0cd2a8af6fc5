"""Persistent defaults for adduct detection"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from lipidadduct.adducts import IonizationMode, ppm_window

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manage user configuration for tolerances and ionization mode"""

    CONFIG_FILE = "lipidadduct_config.json"
    CONFIG_ENV = "LIPIDADDUCT_CONFIG"

    DEFAULT_CONFIG = {
        "mz_tolerance": 0.01,
        "ppm_tolerance": None,
        "ionization_mode": "positive",
        "group_column": "group",
    }

    @classmethod
    def config_path(cls) -> Path:
        return Path(os.getenv(cls.CONFIG_ENV, cls.CONFIG_FILE))

    @classmethod
    def load_config(cls):
        """Load configuration from file merged over the defaults"""
        config = cls.DEFAULT_CONFIG.copy()
        config_path = cls.config_path()
        if config_path.exists():
            try:
                with open(config_path, 'r') as f:
                    stored = json.load(f)
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Ignoring unreadable config {config_path}: {e}")
                return config
            if isinstance(stored, dict):
                config.update(stored)
            else:
                logger.warning(f"Ignoring config {config_path}: expected a JSON object")
        return config

    @classmethod
    def save_config(cls, config):
        """Save configuration to file"""
        with open(cls.config_path(), 'w') as f:
            json.dump(config, f, indent=2)

    @classmethod
    def get_ionization_mode(cls) -> IonizationMode:
        return IonizationMode.parse(cls.load_config()["ionization_mode"])

    @classmethod
    def get_tolerance(cls, mz: Optional[float] = None) -> float:
        """
        Absolute m/z window in Da.

        A configured ppm tolerance takes precedence when the m/z it applies
        to is known.
        """
        config = cls.load_config()
        ppm = config.get("ppm_tolerance")
        if ppm is not None and mz is not None:
            return ppm_window(mz, ppm)
        return float(config["mz_tolerance"])
