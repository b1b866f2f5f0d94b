"""
Credential portal data models.

Wire-facing models use camelCase aliases so they serialize to the shapes
the primary services and the browser form exchange. Python code uses the
snake_case field names.
"""

from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from app.core.config import DEFAULT_CREDENTIAL_TYPE, DEFAULT_ISSUER_NAME


# =============================================================================
# Tags
# =============================================================================

class SubmissionKind(str, Enum):
    """Which primary service a submission targets."""
    ISSUANCE = "issuance"
    VERIFICATION = "verification"


class SubmissionState(str, Enum):
    """Lifecycle of a single submission."""
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class ErrorCategory(str, Enum):
    """User-visible failure categories."""
    INVALID_INPUT = "InvalidInput"          # Malformed user payload, never sent
    SERVER_ERROR = "ServerError"            # Primary reachable but rejected
    NETWORK_UNAVAILABLE = "NetworkUnavailable"  # Timeout or connection failure
    UNKNOWN = "Unknown"                     # Uncategorized transport failure


class ResultSource(str, Enum):
    """Where a success result came from."""
    PRIMARY = "primary"
    FALLBACK = "fallback"
    MOCK = "mock"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Input
# =============================================================================

class CredentialForm(BaseModel):
    """Issuance form fields as entered by the user."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    type: str = DEFAULT_CREDENTIAL_TYPE
    holder_name: str = Field("", alias="holderName")
    holder_email: str = Field("", alias="holderEmail")
    holder_phone: str = Field("", alias="holderPhone")
    issuer_name: str = Field(DEFAULT_ISSUER_NAME, alias="issuerName")
    valid_from: str = Field(
        default_factory=lambda: date.today().isoformat(), alias="validFrom"
    )
    valid_until: str = Field("", alias="validUntil")
    additional_data: str = Field("", alias="additionalData")


def blank_form() -> CredentialForm:
    """Empty form for entering personal data."""
    return CredentialForm()


def sample_form() -> CredentialForm:
    """Pre-filled form for demonstrating an issuance."""
    today = date.today()
    return CredentialForm(
        id=f"cred-{int(datetime.now(timezone.utc).timestamp() * 1000)}",
        type="EducationCredential",
        holder_name="John Doe",
        holder_email="john.doe@example.com",
        holder_phone="+1-555-0123",
        issuer_name="University of Technology",
        valid_from=today.isoformat(),
        valid_until=(today + timedelta(days=365)).isoformat(),
        additional_data="Bachelor of Science in Computer Science, GPA: 3.8",
    )


class CredentialRecord(BaseModel):
    """Normalized credential payload sent to the primary service.

    Frozen: a record is never mutated after the Request Builder returns it.
    Unknown keys from free-text input are kept and echoed on the wire.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    id: str
    type: str = DEFAULT_CREDENTIAL_TYPE
    subject: Dict[str, Any] = Field(default_factory=dict, alias="credentialSubject")
    issuer: str = DEFAULT_ISSUER_NAME
    issued_at: str = Field(default_factory=utc_now_iso, alias="issuanceDate")
    valid_from: Optional[str] = Field(None, alias="validFrom")
    valid_until: Optional[str] = Field(None, alias="validUntil")
    data: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the primary service."""
        return self.model_dump(by_alias=True, exclude_none=True)


# =============================================================================
# Results
# =============================================================================

class _ResultBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    worker_label: str = Field(alias="workerLabel")
    timestamp: str
    message: str
    fallback_used: bool = Field(False, alias="fallbackUsed")
    fallback_note: Optional[str] = Field(None, alias="fallbackNote")
    source: ResultSource = ResultSource.PRIMARY


class IssuanceResult(_ResultBase):
    success: bool
    id: str
    credential: Dict[str, Any] = Field(default_factory=dict)


class VerificationResult(_ResultBase):
    valid: bool
    credential_id: str = Field(alias="credentialId")


class ErrorReport(BaseModel):
    """Failure shown to the user."""
    model_config = ConfigDict(populate_by_name=True)

    category: ErrorCategory
    detail: str
    status_code: Optional[int] = Field(None, alias="statusCode")


SuccessResult = Union[IssuanceResult, VerificationResult]
Outcome = Union[IssuanceResult, VerificationResult, ErrorReport]


def result_from_body(
    kind: SubmissionKind,
    body: Dict[str, Any],
    source: ResultSource = ResultSource.PRIMARY,
) -> SuccessResult:
    """Map a primary-service success body into the kind's result type.

    The wire names the worker ``worker``; results call it ``workerLabel``.
    Fallback markers in the body are dropped; only the mock responder sets
    them.

    Raises:
        pydantic.ValidationError: If the body lacks required fields.
    """
    fields = dict(body)
    if "worker" in fields and "workerLabel" not in fields:
        fields["workerLabel"] = fields.pop("worker")
    fields.setdefault("timestamp", utc_now_iso())
    for key in ("fallbackUsed", "fallback_used", "fallbackNote", "fallback_note"):
        fields.pop(key, None)
    fields["source"] = source
    if kind is SubmissionKind.ISSUANCE:
        fields.setdefault("success", True)
        return IssuanceResult.model_validate(fields)
    return VerificationResult.model_validate(fields)
