"""
ethr-status - revocation checks against Ethereum revocation registries.

Supports:
- credentialStatus entries of type EthrRevocationRegistry
- JSON credentials and JWT VCs, VPs and legacy JWT payloads
- Several networks and registries per resolver
"""

from ethr_status.extractor import (
    MalformedStatusEntryError,
    StatusEntry,
    extract_status_entry,
)
from ethr_status.registry import (
    DeploymentAddressError,
    DeploymentAddresses,
    RevocationRegistryClient,
)
from ethr_status.resolver import (
    ChainConfig,
    ConfigurationError,
    EthrRevocationRegistry,
    RegistryAddressError,
    StatusResult,
    UnsupportedNetworkError,
)

__version__ = "0.1.0"

__all__ = [
    "EthrRevocationRegistry",
    "ChainConfig",
    "StatusResult",
    "StatusEntry",
    "extract_status_entry",
    "RevocationRegistryClient",
    "DeploymentAddresses",
    "MalformedStatusEntryError",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "RegistryAddressError",
    "DeploymentAddressError",
]
