"""
Typed failures raised below the route layer.

Each carries the user-facing `message`; routes map them to HTTPException.
The underlying cause is chained with `raise ... from e` and only logged.
"""

ANALYSIS_FAILED_MESSAGE = "Failed to analyze the media. Please try again."
INGESTION_FAILED_MESSAGE = "Failed to read the selected file."
SESSION_BUSY_MESSAGE = "An analysis is already in progress."


class VerisightError(Exception):
    default_message = "Unexpected error."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class IngestionError(VerisightError):
    default_message = INGESTION_FAILED_MESSAGE


class AnalysisError(VerisightError):
    default_message = ANALYSIS_FAILED_MESSAGE


class SessionBusyError(VerisightError):
    default_message = SESSION_BUSY_MESSAGE
