"""Local mock responder.

Synthesizes the bodies a simulated issuance/verification service would
return, without any network access. Randomness (worker label and the
verification pass/fail draw) comes from an injectable random.Random so
tests can seed it.

The verification draw reports valid with MOCK_VERIFICATION_VALID_RATE
probability. It exists only to exercise both branches of the UI; the
real verification service does not behave this way.
"""

import random
from typing import Any, Dict, Optional

from app.core.config import (
    DEFAULT_CREDENTIAL_TYPE,
    MOCK_ISSUER_DID,
    MOCK_VERIFICATION_VALID_RATE,
    MOCK_WORKER_COUNT,
)
from app.credentials.models import (
    CredentialRecord,
    ResultSource,
    SubmissionKind,
    SuccessResult,
    result_from_body,
    utc_now_iso,
)

FALLBACK_NOTE = "primary service unavailable — substituted response"

_default_rng = random.Random()


def _worker_label(rng: random.Random) -> str:
    return f"mock-worker-{rng.randint(1, MOCK_WORKER_COUNT)}"


def mock_response(
    kind: SubmissionKind,
    record: CredentialRecord,
    rng: Optional[random.Random] = None,
) -> Dict[str, Any]:
    """Return the wire body a simulated service would answer with."""
    rng = rng or _default_rng
    now = utc_now_iso()

    if kind is SubmissionKind.ISSUANCE:
        return {
            "success": True,
            "id": record.id,
            "worker": _worker_label(rng),
            "timestamp": now,
            "credential": {
                "id": record.id,
                "issuer": MOCK_ISSUER_DID,
                "issuanceDate": now,
                "type": record.type or DEFAULT_CREDENTIAL_TYPE,
                "credentialSubject": {"id": record.id, **record.to_payload()},
            },
            "message": "Credential issued successfully to Kubernetes cluster",
        }

    is_valid = rng.random() < MOCK_VERIFICATION_VALID_RATE
    return {
        "valid": is_valid,
        "worker": _worker_label(rng),
        "timestamp": now,
        "credentialId": record.id,
        "message": (
            "Credential verified successfully"
            if is_valid
            else "Credential not found or invalid"
        ),
    }


def synthesize(
    kind: SubmissionKind,
    record: CredentialRecord,
    rng: Optional[random.Random] = None,
) -> SuccessResult:
    """Substitute a success result for a failed primary call.

    Never fails. The result is tagged as a fallback and the note is
    appended to its message.
    """
    body = mock_response(kind, record, rng)
    body["message"] = f"{body['message']} ({FALLBACK_NOTE})"
    result = result_from_body(kind, body, source=ResultSource.FALLBACK)
    return result.model_copy(update={"fallback_used": True, "fallback_note": FALLBACK_NOTE})
