"""Shared fixtures for ethr-status tests."""

from unittest.mock import AsyncMock

import jwt
import pytest


NAMESPACE = "0x6B6B873eaB06D331fFA6c431aC874Ff954A2c317"
REVOCATION_LIST = "0x3458b9bfc7963978b7d40ef225177c45193c2889902357db3b043a4e319a9627"
REVOCATION_KEY = "0x89343794d2fb7dd5d0fba9593a4bb13beaff93a61577029176d0117b0c53b8e6"

REGISTRY_A = "0x" + "a1" * 20
REGISTRY_B = "0x" + "b2" * 20

SIGNING_KEY = "test-signing-key-that-is-long-enough-for-hs256"


class FakeRegistryClient:
    """Stands in for RevocationRegistryClient."""

    def __init__(self, connection, address, revoked=False):
        self.connection = connection
        self.address = address
        self.is_revoked = AsyncMock(return_value=revoked)


@pytest.fixture
def status_entry():
    """A credentialStatus without network information."""
    return {
        "id": "https://example.edu/status/24",
        "type": "EthrRevocationRegistry",
        "namespace": NAMESPACE,
        "revocationList": REVOCATION_LIST,
        "revocationKey": REVOCATION_KEY,
    }


@pytest.fixture
def clients():
    """Fake clients created by client_factory, keyed by connection."""
    return {}


@pytest.fixture
def client_factory(clients):
    """A client_factory that records the fake clients it builds."""

    def build(connection, address):
        client = FakeRegistryClient(connection, address)
        clients[connection] = client
        return client

    return build


def make_jwt(payload: dict) -> str:
    """Encode a JWT; the signature is never checked."""
    return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")
