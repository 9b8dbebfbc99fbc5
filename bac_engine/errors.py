"""Errors raised for impossible engine input."""


class BacError(ValueError):
    """Base class for input the engine refuses to compute with."""


class InvalidProfile(BacError):
    """Non-positive or non-finite weight, or a gender with no distribution constant."""


class InvalidDrinkEvent(BacError):
    """Negative or non-finite volume, or a strength outside 0-100 %."""


class InvalidGathering(BacError):
    """Participant ids that are not unique."""
