"""Credential portal exceptions mapped to user-visible error categories.

Only the Request Builder raises; the orchestrator converts every
exception into an ErrorReport, so none of these escape submit().
"""

from app.credentials.models import ErrorCategory


class CredentialPortalError(Exception):
    """Base exception for credential portal operations.

    Carries an ErrorCategory the orchestrator copies into the ErrorReport.
    """

    def __init__(self, code: ErrorCategory, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class InvalidInputError(CredentialPortalError):
    """User input could not be turned into a CredentialRecord.

    Maps to InvalidInput. Used when:
    - Free text is not valid JSON
    - Free text is JSON but not an object
    - Fields have the wrong shape (e.g. non-object credentialSubject)
    """

    def __init__(self, message: str = "malformed input"):
        super().__init__(ErrorCategory.INVALID_INPUT, message)
