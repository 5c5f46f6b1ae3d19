"""
Error taxonomy shared by the document services and the HTTP layer.

Every error carries a short user-facing message and the HTTP status the
boundary should answer with. Provider details are logged, never put here.
"""


class LawWiseError(Exception):
    status_code: int = 500
    default_message: str = "Something went wrong. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(LawWiseError):
    status_code = 400
    default_message = "Invalid request."


class ExtractionFailure(LawWiseError):
    status_code = 400
    default_message = "The uploaded PDF appears to be corrupted. Please re-save it and try again."


class SessionExpiredError(LawWiseError):
    """The session id is unknown, expired or was cleared."""

    status_code = 404
    default_message = "Your document session has expired or is invalid. Please upload the document again."


class AnswerProviderFailure(LawWiseError):
    status_code = 500
    default_message = "Failed to get a response from the AI."


class TranslationFailure(LawWiseError):
    """Raised by translators; callers fall back to the untranslated text."""

    default_message = "Translation failed."
