"""Exception types raised by lipidadduct."""


class LipidAdductError(Exception):
    """Base class for lipidadduct errors"""


class UnknownAdductError(LipidAdductError, ValueError):
    """Raised when an adduct label is in neither polarity table."""

    def __init__(self, adduct: str):
        self.adduct = adduct
        super().__init__(
            f"Adduct not found: '{adduct}'. "
            "Run `lipidadduct adducts` to list the supported labels"
        )
