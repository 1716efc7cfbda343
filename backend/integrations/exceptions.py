"""Typed exception hierarchy for brokerage CSV import errors.

Provides structured exceptions so the API layer can tell the user exactly
what is wrong with an upload (unknown header vs. bad cell vs. empty file).
"""


class CsvImportError(Exception):
    """Base exception for all CSV import errors.

    Carries the source identifier (when known) so callers can say which
    brokerage format was being read.
    """

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(message)


class MissingColumnsError(CsvImportError):
    """The header does not match any recognized source format.

    Raised before any row is parsed.
    """

    def __init__(self, missing_columns: list[str], source: str = ""):
        self.missing_columns = list(missing_columns)
        super().__init__(
            "Missing required columns: " + ", ".join(self.missing_columns),
            source,
        )


class MalformedRowError(CsvImportError):
    """A numeric or identifier cell could not be parsed.

    ``row_number`` is 1-based over data rows (the header is not counted).
    """

    def __init__(self, row_number: int, columns: list[str], source: str = ""):
        self.row_number = row_number
        self.columns = list(columns)
        super().__init__(
            f"Row {row_number}: could not parse " + ", ".join(self.columns),
            source,
        )


class EmptyFileError(CsvImportError):
    """The upload has a header but no data rows (or nothing at all)."""

    pass


class UnreadableFileError(CsvImportError):
    """The upload is not UTF-8 text or not valid CSV."""

    pass
