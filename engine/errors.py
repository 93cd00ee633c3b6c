"""Exceptions raised by the billing engine."""


class FatalInputError(ValueError):
    """Inputs cannot produce an allocation (e.g. zero building usage)."""


class ConfigLookupError(Exception):
    """A configuration store could not be read. Callers fall back to defaults."""


class CalculationRejectedError(Exception):
    """A calculation failed validation and no force override was given."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result
