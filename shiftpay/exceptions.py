"""
Engine Exceptions

Errors raised synchronously by the calculation engines.
"""


class MissingInputError(ValueError):
    """A required, non-recoverable input (base salary, month length) is absent."""


class MasterValidationError(ValueError):
    """A compensation master violates its write-time invariants."""
