"""Credential submission orchestration and fallback."""

from .builder import (
    build_from_form,
    build_from_text,
    build_record,
    generate_credential_id,
)
from .client import (
    Delivered,
    RejectedByServer,
    RemoteClient,
    RemoteOutcome,
    TransportFailed,
    TransportFailure,
)
from .exceptions import CredentialPortalError, InvalidInputError
from .fallback import FALLBACK_NOTE, mock_response, synthesize
from .models import (
    CredentialForm,
    CredentialRecord,
    ErrorCategory,
    ErrorReport,
    IssuanceResult,
    ResultSource,
    SubmissionKind,
    SubmissionState,
    VerificationResult,
    blank_form,
    sample_form,
)
from .orchestrator import CredentialOrchestrator

__all__ = [
    # Builder
    "build_from_form",
    "build_from_text",
    "build_record",
    "generate_credential_id",
    # Client
    "Delivered",
    "RejectedByServer",
    "RemoteClient",
    "RemoteOutcome",
    "TransportFailed",
    "TransportFailure",
    # Exceptions
    "CredentialPortalError",
    "InvalidInputError",
    # Fallback
    "FALLBACK_NOTE",
    "mock_response",
    "synthesize",
    # Models
    "CredentialForm",
    "CredentialRecord",
    "ErrorCategory",
    "ErrorReport",
    "IssuanceResult",
    "ResultSource",
    "SubmissionKind",
    "SubmissionState",
    "VerificationResult",
    "blank_form",
    "sample_form",
    # Orchestrator
    "CredentialOrchestrator",
]
