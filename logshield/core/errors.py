NO_PARSEABLE_DATA_MESSAGE = (
    "No parseable data found. Ensure file contains JSON, CSV, or standard log entries."
)
PARSE_FAILED_MESSAGE = "Parsing failed. Check format."


class LogShieldError(Exception):
    """Base error for the ingestion pipeline"""


class NoParseableDataError(LogShieldError):
    def __init__(self, message: str = NO_PARSEABLE_DATA_MESSAGE):
        super().__init__(message)


class IngestionBusyError(LogShieldError):
    def __init__(self, message: str = "An ingestion pass is already in progress"):
        super().__init__(message)
