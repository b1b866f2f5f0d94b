"""
Kube Credential Portal configuration constants.

Constants are organized into:
- CONTRACT: Fixed by the primary service HTTP contract
- DEMO: Values of the local mock/fallback responder
- OPERATIONAL: Deployment-specific settings (env vars)

Values are read once at import. Orchestrators never read this module
directly; they receive a PortalConfig built by PortalConfig.from_env().
"""

import os
from dataclasses import dataclass

# =============================================================================
# CONTRACT CONSTANTS (fixed by the primary service contract)
# =============================================================================

# Endpoint paths appended to the per-orchestrator base URL
ISSUE_PATH: str = "/issue"
VERIFY_PATH: str = "/verify"

# Per-call timeout when KUBE_REQUEST_TIMEOUT_MS is not set
DEFAULT_REQUEST_TIMEOUT_MS: int = 10_000

# Status code that triggers the fallback substitution
FALLBACK_STATUS_CODE: int = 500

# =============================================================================
# DEMO CONSTANTS (mock responder)
# =============================================================================

# Issuer DID echoed in synthesized issuance credentials
MOCK_ISSUER_DID: str = "did:example:kube-credential-system"

# Number of simulated workers (labels mock-worker-1..N)
MOCK_WORKER_COUNT: int = 3

# Fraction of synthesized verifications reported as valid
MOCK_VERIFICATION_VALID_RATE: float = 0.7

# Defaults used when the user leaves the fields untouched
DEFAULT_CREDENTIAL_TYPE: str = "VerifiableCredential"
DEFAULT_ISSUER_NAME: str = "Kube Credential System"

# =============================================================================
# OPERATIONAL SETTINGS (deployment-specific, via environment variables)
# =============================================================================

# Primary service base URLs
ISSUANCE_API: str = os.getenv("KUBE_ISSUANCE_API", "https://insurance-kube.vercel.app")
VERIFICATION_API: str = os.getenv("KUBE_VERIFICATION_API", "https://verification-kube.vercel.app")

# Mock-only mode: bypass the primary service entirely
USE_MOCK_API: bool = os.getenv("KUBE_USE_MOCK_API", "false").lower() == "true"

# Substitute a mock response when the primary returns HTTP 500
ENABLE_FALLBACK: bool = os.getenv("KUBE_ENABLE_FALLBACK", "true").lower() == "true"

REQUEST_TIMEOUT_MS: int = int(
    os.getenv("KUBE_REQUEST_TIMEOUT_MS", str(DEFAULT_REQUEST_TIMEOUT_MS))
)

# Latency the mock responder simulates before answering
MOCK_DELAY_MS: int = int(os.getenv("KUBE_MOCK_DELAY_MS", "800"))

# Admin endpoint visibility
# Default: True for dev, set to False in production deployments
ADMIN_ENDPOINT_ENABLED: bool = os.getenv("ADMIN_ENDPOINT_ENABLED", "true").lower() == "true"


@dataclass(frozen=True)
class PortalConfig:
    """Immutable configuration handed to an orchestrator at construction.

    Attributes:
        issuance_api: Base URL of the issuance service.
        verification_api: Base URL of the verification service.
        use_mock_api: Bypass the primary service and answer locally.
        enable_fallback: Substitute a mock response on HTTP 500.
        request_timeout_ms: Timeout applied to each primary call.
        mock_delay_ms: Simulated latency of mock/fallback responses.
    """

    issuance_api: str = ISSUANCE_API
    verification_api: str = VERIFICATION_API
    use_mock_api: bool = False
    enable_fallback: bool = True
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    mock_delay_ms: int = 0

    @classmethod
    def from_env(cls) -> "PortalConfig":
        """Build a config from the module-level environment settings."""
        return cls(
            issuance_api=ISSUANCE_API,
            verification_api=VERIFICATION_API,
            use_mock_api=USE_MOCK_API,
            enable_fallback=ENABLE_FALLBACK,
            request_timeout_ms=REQUEST_TIMEOUT_MS,
            mock_delay_ms=MOCK_DELAY_MS,
        )
