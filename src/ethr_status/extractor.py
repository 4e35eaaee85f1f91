"""
credentialStatus extraction.

Locates the revocation pointer of a credential regardless of how the
credential is encoded: a JSON object, a JSON string, or a JWT carrying a
Verifiable Credential, a Verifiable Presentation, or a legacy payload.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import jwt


LOGGER = logging.getLogger(__name__)

MALFORMED_MESSAGE = (
    "bad_request: credentialStatus entry is not formatted correctly. "
    "Validity can not be determined."
)

# Returned by a reader that could not decode the credential at all
NOT_DECODED = object()


class MalformedStatusEntryError(ValueError):
    """Raised when credentialStatus is present but not usable."""

    def __init__(self, message: str = MALFORMED_MESSAGE) -> None:
        super().__init__(message)


@dataclass
class StatusEntry:
    """Parsed credentialStatus of type EthrRevocationRegistry."""

    type: str
    namespace: Any
    revocation_list: Any
    revocation_key: Any
    id: Any = None
    chain_id: int | None = None
    registry: str | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StatusEntry:
        """Create a StatusEntry from a credentialStatus object.

        Raises:
            MalformedStatusEntryError: If type is missing, chainId is not a
                number, or registry is not a string.
        """
        if not data.get("type"):
            raise MalformedStatusEntryError()

        return cls(
            id=data.get("id"),
            type=data["type"],
            namespace=data.get("namespace"),
            revocation_list=data.get("revocationList"),
            revocation_key=data.get("revocationKey"),
            chain_id=_parse_chain_id(data.get("chainId")),
            registry=_parse_registry(data.get("registry")),
            raw=dict(data),
        )


def _parse_chain_id(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise MalformedStatusEntryError()
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            text = value.strip()
            if text[:2].lower() == "0x":
                return int(text[2:], 16)
            return int(text, 10)
        except ValueError as e:
            raise MalformedStatusEntryError() from e
    raise MalformedStatusEntryError()


def _parse_registry(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise MalformedStatusEntryError()
    return value


def _present(value: Any) -> bool:
    """Whether a claim value counts as set.

    Missing, null, false, zero and the empty string are unset. Empty objects
    and arrays are set, so that an empty credentialStatus is reported as
    malformed rather than absent.
    """
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0
    return True


def _status_of(document: Any) -> Any | None:
    if isinstance(document, Mapping):
        status = document.get("credentialStatus")
        if _present(status):
            return status
    return None


def read_mapping(credential: Any) -> Any:
    """Read credentialStatus from an already parsed credential."""
    if isinstance(credential, str):
        return NOT_DECODED
    return _status_of(credential)


def read_jwt(credential: Any) -> Any:
    """Read credentialStatus from a JWT VC, JWT VP or legacy JWT payload.

    The signature is not verified.
    """
    if not isinstance(credential, str):
        return NOT_DECODED
    try:
        payload = jwt.decode(credential, options={"verify_signature": False})
    except jwt.PyJWTError:
        LOGGER.debug("Credential is not a JWT")
        return NOT_DECODED

    for candidate in (payload.get("vc"), payload.get("vp"), payload):
        status = _status_of(candidate)
        if status is not None:
            return status
    return None


def read_json(credential: Any) -> Any:
    """Read credentialStatus from a JSON encoded credential."""
    if not isinstance(credential, str):
        return NOT_DECODED
    try:
        document = json.loads(credential)
    except ValueError:
        LOGGER.debug("Credential is not a JSON document either")
        return NOT_DECODED
    return _status_of(document)


READERS: tuple[Callable[[Any], Any], ...] = (read_mapping, read_jwt, read_json)


def find_credential_status(credential: Any) -> Any | None:
    """Return the raw credentialStatus value of a credential, if any.

    Readers are tried in order; the first one able to decode the credential
    decides the result, even when it finds no credentialStatus.

    Args:
        credential: A credential mapping, a JSON string, or a JWT.

    Returns:
        The credentialStatus value, or None when absent or undecodable.
    """
    for reader in READERS:
        status = reader(credential)
        if status is not NOT_DECODED:
            return status
    return None


def extract_status_entry(credential: Any) -> StatusEntry | None:
    """Extract and validate the credentialStatus of a credential.

    Args:
        credential: A credential mapping, a JSON string, or a JWT.

    Returns:
        The parsed StatusEntry, or None if the credential has no
        credentialStatus.

    Raises:
        MalformedStatusEntryError: If credentialStatus is not an object or
            has no type.
    """
    status = find_credential_status(credential)
    if status is None:
        return None
    if not isinstance(status, Mapping):
        raise MalformedStatusEntryError()
    return StatusEntry.from_dict(status)
