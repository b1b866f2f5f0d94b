"""Root conftest for all tests - provides shared fixtures."""

import os

# No simulated mock latency and no real primary calls from app.main
# (must be set before app.core.config is imported)
os.environ.setdefault("KUBE_MOCK_DELAY_MS", "0")
os.environ.setdefault("KUBE_ISSUANCE_API", "http://issuer.test")
os.environ.setdefault("KUBE_VERIFICATION_API", "http://verifier.test")

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.config import PortalConfig
from app.credentials import CredentialForm, RemoteClient


@pytest.fixture
def portal_config():
    """Config pointing at unroutable test hosts, fallback on, no delay."""
    return PortalConfig(
        issuance_api="http://issuer.test",
        verification_api="http://verifier.test",
        use_mock_api=False,
        enable_fallback=True,
        request_timeout_ms=10_000,
        mock_delay_ms=0,
    )


@pytest.fixture
def seeded_rng():
    return random.Random(42)


@pytest.fixture
def mock_client():
    """RemoteClient stand-in whose send() is an AsyncMock."""
    client = MagicMock(spec=RemoteClient)
    client.send = AsyncMock()
    return client


@pytest.fixture
def personal_form():
    """Form a user filled in by hand, id left blank."""
    return CredentialForm(
        id="",
        type="VerifiableCredential",
        holder_name="A",
        holder_email="a@x.com",
    )
