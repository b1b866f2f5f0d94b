"""Submission orchestrator.

Drives one submission through IDLE -> SUBMITTING -> SUCCEEDED | FAILED:

1. Build a CredentialRecord from the raw input (InvalidInput on failure,
   no network call)
2. Mock-only mode: answer locally, never reported as a fallback
3. POST the record to the primary service
4. Classify the outcome:
   - Delivered              -> SUCCEEDED with the primary's result
   - Rejected 500, fallback -> SUCCEEDED with a synthesized result
   - Rejected otherwise     -> FAILED ServerError
   - Timeout / refused      -> FAILED NetworkUnavailable
   - Other transport error  -> FAILED Unknown
   - Client raised          -> FAILED Unknown

Issuance and verification share this code; SubmissionKind selects the
endpoint and the result type.

An orchestrator is NOT reentrant. Callers must not call submit() while
current_state is SUBMITTING; the presentation layer disables its submit
control for that window. Separate instances share no state.
"""

import asyncio
import logging
import random
import uuid
from typing import Optional

from pydantic import ValidationError

from app.core.config import FALLBACK_STATUS_CODE, ISSUE_PATH, VERIFY_PATH, PortalConfig
from app.credentials.builder import RawInput, build_record
from app.credentials.client import (
    Delivered,
    RejectedByServer,
    RemoteClient,
    RemoteOutcome,
    TransportFailed,
    TransportFailure,
)
from app.credentials.exceptions import InvalidInputError
from app.credentials.fallback import mock_response, synthesize
from app.credentials.models import (
    CredentialRecord,
    ErrorCategory,
    ErrorReport,
    Outcome,
    ResultSource,
    SubmissionKind,
    SubmissionState,
    SuccessResult,
    result_from_body,
)

log = logging.getLogger(__name__)

NETWORK_UNAVAILABLE_DETAIL = "primary service unreachable; start it or check connectivity"


class CredentialOrchestrator:
    """Runs submissions of one kind against the primary service."""

    def __init__(
        self,
        kind: SubmissionKind,
        config: PortalConfig,
        client: Optional[RemoteClient] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the orchestrator.

        Args:
            kind: Issuance or verification.
            config: Endpoint and policy settings, fixed for this instance.
            client: Remote client; a default RemoteClient if omitted.
            rng: Randomness for the mock responder.
        """
        self.kind = kind
        self.config = config
        self.client = client or RemoteClient()
        self.rng = rng
        self._state = SubmissionState.IDLE
        self.result: Optional[SuccessResult] = None
        self.error: Optional[ErrorReport] = None

    @property
    def current_state(self) -> SubmissionState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state is SubmissionState.SUBMITTING

    @property
    def base_url(self) -> str:
        if self.kind is SubmissionKind.ISSUANCE:
            return self.config.issuance_api
        return self.config.verification_api

    @property
    def path(self) -> str:
        return ISSUE_PATH if self.kind is SubmissionKind.ISSUANCE else VERIFY_PATH

    async def submit(self, raw_input: RawInput) -> Outcome:
        """Run one submission and return its result or error report.

        Always returns exactly one of a success result or an ErrorReport,
        and leaves the orchestrator ready for the next submission.
        """
        submission_id = uuid.uuid4().hex[:12]
        extra = {"submission_id": submission_id, "kind": self.kind.value}
        self.result = None
        self.error = None

        try:
            record = build_record(raw_input)
        except InvalidInputError as e:
            log.info(f"Rejected malformed input: {e.message}", extra=extra)
            return self._fail(ErrorReport(category=e.code, detail=e.message))

        self._state = SubmissionState.SUBMITTING

        if self.config.use_mock_api:
            log.info(f"Mock-only mode, answering {record.id} locally", extra=extra)
            await self._simulate_latency()
            body = mock_response(self.kind, record, self.rng)
            return self._succeed(result_from_body(self.kind, body, source=ResultSource.MOCK))

        try:
            outcome = await self.client.send(
                self.base_url,
                self.path,
                record.to_payload(),
                timeout_ms=self.config.request_timeout_ms,
            )
        except Exception as e:
            log.exception(f"Remote client raised for {record.id}", extra=extra)
            return self._fail(ErrorReport(
                category=ErrorCategory.UNKNOWN,
                detail=str(e) or type(e).__name__,
            ))
        return await self._classify(outcome, record, extra)

    async def _classify(
        self, outcome: RemoteOutcome, record: CredentialRecord, extra: dict
    ) -> Outcome:
        if isinstance(outcome, Delivered):
            try:
                result = result_from_body(self.kind, outcome.body)
            except ValidationError as e:
                log.warning(f"Primary response did not match the {self.kind.value} shape: {e}", extra=extra)
                return self._fail(ErrorReport(
                    category=ErrorCategory.UNKNOWN,
                    detail=f"unexpected response from primary service: {e.error_count()} invalid field(s)",
                ))
            log.info(f"Primary accepted {record.id} (worker={result.worker_label})", extra=extra)
            return self._succeed(result)

        if isinstance(outcome, RejectedByServer):
            if outcome.status_code == FALLBACK_STATUS_CODE and self.config.enable_fallback:
                log.warning(
                    f"Primary returned {outcome.status_code}, falling back to mock response",
                    extra=extra,
                )
                await self._simulate_latency()
                return self._succeed(synthesize(self.kind, record, self.rng))

            detail = outcome.body.get("error") or "server error"
            log.warning(f"Primary rejected {record.id}: {outcome.status_code} {detail}", extra=extra)
            return self._fail(ErrorReport(
                category=ErrorCategory.SERVER_ERROR,
                detail=str(detail),
                status_code=outcome.status_code,
            ))

        if isinstance(outcome, TransportFailed):
            if outcome.reason in (TransportFailure.TIMEOUT, TransportFailure.CONNECTION_REFUSED):
                log.warning(f"Primary unreachable ({outcome.reason.value})", extra=extra)
                return self._fail(ErrorReport(
                    category=ErrorCategory.NETWORK_UNAVAILABLE,
                    detail=NETWORK_UNAVAILABLE_DETAIL,
                ))
            log.warning(f"Transport failure: {outcome.message}", extra=extra)
            return self._fail(ErrorReport(
                category=ErrorCategory.UNKNOWN,
                detail=outcome.message or "unknown error",
            ))

        log.error(f"Unrecognized remote outcome {outcome!r}", extra=extra)
        return self._fail(ErrorReport(category=ErrorCategory.UNKNOWN, detail=repr(outcome)))

    async def _simulate_latency(self) -> None:
        if self.config.mock_delay_ms > 0:
            await asyncio.sleep(self.config.mock_delay_ms / 1000)

    def _succeed(self, result: SuccessResult) -> SuccessResult:
        self.result = result
        self._state = SubmissionState.SUCCEEDED
        return result

    def _fail(self, report: ErrorReport) -> ErrorReport:
        self.error = report
        self._state = SubmissionState.FAILED
        return report
