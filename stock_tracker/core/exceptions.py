"""Stock tracker exceptions."""


class StockTrackerError(Exception):
    """Base class for stock tracker errors."""


class FetchError(StockTrackerError):
    """A data source could not produce the stock list.

    The message is shown to the user as-is.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class StorageError(StockTrackerError):
    """The local cache could not be read or written."""
