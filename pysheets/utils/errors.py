from dataclasses import dataclass


# ---- exceptions ----
class SheetsError(Exception):
    pass


class InvalidAddress(SheetsError):
    pass


class OutOfRange(SheetsError):
    pass


class FatalError(SheetsError):
    """Unrecoverable environment failure, e.g. the destination file cannot be written."""
    pass


@dataclass
class Status:
    message: str = ""
    error: bool = False
