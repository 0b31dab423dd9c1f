"""Custom exceptions for the estimated tax engine."""

from decimal import Decimal


class EngineError(Exception):
    """Base exception for estimated tax computation errors."""


class NotFoundError(EngineError):
    """Raised when requested reference data or a stored estimate does not exist."""

    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class BracketGapError(EngineError):
    """Raised when no tax bracket covers a taxable income value.

    Signals malformed reference data, not bad user input.
    """

    def __init__(self, taxable_income: Decimal | None, message: str | None = None):
        self.taxable_income = taxable_income
        if message is None:
            message = f"No tax bracket found for taxable income {taxable_income}"
        super().__init__(message)


class InvalidInputError(EngineError):
    """Raised when taxpayer input fails validation."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Invalid input on '{field}': {message}")


class RepositoryError(EngineError):
    """Raised when the backing store fails for reasons other than a missing record."""

    def __init__(self, message: str):
        super().__init__(f"Repository error: {message}")


class CsvImportError(EngineError):
    """Raised when an estimate CSV cannot be read.

    row is the 1-based data row (the header is row 0), or None when the file
    as a whole is malformed.
    """

    def __init__(self, source: str, message: str, row: int | None = None):
        self.source = source
        self.row = row
        where = f"{source}, row {row}" if row is not None else source
        super().__init__(f"Import error from {where}: {message}")
