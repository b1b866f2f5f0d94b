"""Request builder: raw form or text input to CredentialRecord.

Pure transformation, no I/O. A missing or blank id is always replaced
with a generated one, so building never fails on the id alone.
"""

import json
import math
import secrets
import time
from typing import Any, Mapping, Union

from pydantic import ValidationError

from app.credentials.exceptions import InvalidInputError
from app.credentials.models import CredentialForm, CredentialRecord, utc_now_iso

RawInput = Union[CredentialForm, str, Mapping[str, Any]]


def generate_credential_id() -> str:
    """Return a fresh id of the form ``cred-<ms timestamp>-<hex>``."""
    return f"cred-{int(time.time() * 1000)}-{secrets.token_hex(3)}"


def build_from_form(form: CredentialForm) -> CredentialRecord:
    """Build a record from the issuance form.

    The holder's email doubles as the subject id. Empty optional fields
    are left out of the subject.
    """
    subject = {
        "id": form.holder_email,
        "name": form.holder_name,
        "email": form.holder_email,
        "phone": form.holder_phone,
        "additionalData": form.additional_data,
    }
    subject = {k: v for k, v in subject.items() if v}

    return CredentialRecord(
        id=form.id.strip() or generate_credential_id(),
        type=form.type,
        subject=subject,
        issuer=form.issuer_name,
        issued_at=utc_now_iso(),
        valid_from=form.valid_from or None,
        valid_until=form.valid_until or None,
        data=form.additional_data or None,
    )


def build_from_mapping(fields: Mapping[str, Any]) -> CredentialRecord:
    """Build a record from an already-parsed JSON object.

    Raises:
        InvalidInputError: If the fields don't fit a CredentialRecord.
    """
    values = dict(fields)
    raw_id = values.get("id")
    if raw_id is None or (isinstance(raw_id, str) and not raw_id.strip()):
        values["id"] = generate_credential_id()
    values.pop("issuanceDate", None)
    values.pop("issued_at", None)
    try:
        return CredentialRecord.model_validate({**values, "issuanceDate": utc_now_iso()})
    except ValidationError as e:
        raise InvalidInputError() from e


def _reject_constant(name: str) -> float:
    raise ValueError(f"non-finite number {name} is not valid JSON")


def _finite_float(value: str) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"number {value} is out of range")
    return number


def build_from_text(text: str) -> CredentialRecord:
    """Parse a free-text JSON block into a record.

    Only strict JSON is accepted: NaN, Infinity and overflowing numbers are
    rejected, since they could not be serialized back onto the wire.

    Raises:
        InvalidInputError: If the text is not a JSON object.
    """
    try:
        parsed = json.loads(
            text, parse_constant=_reject_constant, parse_float=_finite_float
        )
    except (ValueError, TypeError, RecursionError) as e:
        raise InvalidInputError() from e
    if not isinstance(parsed, dict):
        raise InvalidInputError()
    return build_from_mapping(parsed)


def build_record(raw: RawInput) -> CredentialRecord:
    """Dispatch on the kind of raw input the presentation layer supplied."""
    if isinstance(raw, CredentialForm):
        return build_from_form(raw)
    if isinstance(raw, str):
        return build_from_text(raw)
    if isinstance(raw, Mapping):
        return build_from_mapping(raw)
    raise InvalidInputError()
