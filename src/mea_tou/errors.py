"""Exceptions raised by the TOU calculator."""


class TouError(Exception):
    """Base exception for TOU calculator errors."""
    pass


class InvalidDateError(TouError, ValueError):
    """The billing date could not be parsed."""
    pass


class InvalidReadingError(TouError, ValueError):
    """An interval reading is malformed.

    The position of the reading in the input list is kept on ``index``.
    """

    def __init__(self, index: int, message: str):
        self.index = index
        super().__init__(f"Invalid reading at index {index}: {message}")


class InvalidCalendarError(TouError, ValueError):
    """The tariff calendar configuration is malformed."""
    pass
