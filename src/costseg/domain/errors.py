# src/costseg/domain/errors.py
from __future__ import annotations


class CostSegError(ValueError):
    """Base class for every error the engine raises on bad input."""


class InvalidInput(CostSegError):
    """Non-positive basis, out-of-range rate, negative discount rate, ..."""


class UnsupportedRecoveryPeriod(CostSegError):
    def __init__(self, period: object, valid: tuple[float, ...] | None = None):
        self.period = period
        self.valid = valid
        msg = f"Invalid MACRS recovery period: {period!r}"
        if valid:
            msg += ". Valid periods are: " + ", ".join(_fmt_period(p) for p in valid)
        super().__init__(msg)


# alternate name for the same error
InvalidRecoveryPeriod = UnsupportedRecoveryPeriod


class UnsupportedPropertyType(InvalidInput):
    def __init__(self, property_type: object, valid: tuple[str, ...] = ()):
        self.property_type = property_type
        msg = f"Unknown property type: {property_type!r}"
        if valid:
            msg += ". Valid types are: " + ", ".join(valid)
        super().__init__(msg)


class IncompleteAssetList(CostSegError):
    """A study was submitted for calculation without any asset lines."""


def _fmt_period(p: float) -> str:
    return str(int(p)) if float(p).is_integer() else str(p)
