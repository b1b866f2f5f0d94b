import logging
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core import config
from app.core.config import PortalConfig
from app.credentials import (
    CredentialForm,
    CredentialOrchestrator,
    ErrorCategory,
    ErrorReport,
    SubmissionKind,
    blank_form,
    sample_form,
)
from app.logging_config import configure_logging

configure_logging()
log = logging.getLogger("kube_portal")

APP_NAME = "Kube Credential Portal"
APP_VERSION = "0.1.0"

app = FastAPI(title=APP_NAME, version=APP_VERSION)

# Read once at startup; immutable for the process lifetime
portal_config = PortalConfig.from_env()

ERROR_STATUS = {
    ErrorCategory.INVALID_INPUT: 400,
    ErrorCategory.SERVER_ERROR: 502,
    ErrorCategory.NETWORK_UNAVAILABLE: 503,
    ErrorCategory.UNKNOWN: 502,
}


class VerifyFormRequest(BaseModel):
    """Free-text JSON block typed into the verification page."""
    json_input: str


@app.get("/healthz")
def healthz():
    return {"ok": True}


@app.get("/version")
def version():
    return {"name": APP_NAME, "version": APP_VERSION}


@app.get("/admin")
def admin():
    """Return the effective portal configuration.

    Disabled by setting ADMIN_ENDPOINT_ENABLED=false.
    """
    if not config.ADMIN_ENDPOINT_ENABLED:
        return JSONResponse(status_code=404, content={"detail": "Admin endpoint disabled"})

    return {
        "endpoints": {
            "issuance_api": portal_config.issuance_api,
            "verification_api": portal_config.verification_api,
            "issue_path": config.ISSUE_PATH,
            "verify_path": config.VERIFY_PATH,
        },
        "policy": {
            "use_mock_api": portal_config.use_mock_api,
            "enable_fallback": portal_config.enable_fallback,
            "fallback_status_code": config.FALLBACK_STATUS_CODE,
        },
        "timing": {
            "request_timeout_ms": portal_config.request_timeout_ms,
            "mock_delay_ms": portal_config.mock_delay_ms,
        },
    }


@app.middleware("http")
async def req_log(request: Request, call_next):
    start = time.time()
    route = request.url.path
    remote = request.client.host if request.client else "-"
    resp = await call_next(request)
    duration_ms = int((time.time() - start) * 1000)
    log.info(f"request_complete status={resp.status_code} duration_ms={duration_ms}",
             extra={"route": route, "remote_addr": remote})
    return resp


@app.get("/api/forms/blank")
def form_blank():
    return blank_form().model_dump(by_alias=True)


@app.get("/api/forms/sample")
def form_sample():
    return sample_form().model_dump(by_alias=True)


async def _run_submission(kind: SubmissionKind, raw_input) -> JSONResponse:
    # Fresh orchestrator per request: instances are not reentrant
    orchestrator = CredentialOrchestrator(kind, portal_config)
    outcome = await orchestrator.submit(raw_input)
    state = orchestrator.current_state.value

    if isinstance(outcome, ErrorReport):
        return JSONResponse(
            status_code=ERROR_STATUS[outcome.category],
            content={"state": state, "error": outcome.model_dump(mode="json", by_alias=True)},
        )
    return JSONResponse(
        content={"state": state, "result": outcome.model_dump(mode="json", by_alias=True)},
    )


@app.post("/api/issue")
async def issue(form: CredentialForm):
    return await _run_submission(SubmissionKind.ISSUANCE, form)


@app.post("/api/verify")
async def verify(req: VerifyFormRequest):
    return await _run_submission(SubmissionKind.VERIFICATION, req.json_input)
