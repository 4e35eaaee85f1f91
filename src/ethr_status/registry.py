"""
On-chain revocation registry access.

Wraps the EthereumRevocationRegistry contract behind a small async query
interface, one client per (registry address, chain id) pair.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol

from web3 import AsyncWeb3
from web3.providers.async_base import AsyncBaseProvider


LOGGER = logging.getLogger(__name__)

# Networks served for a single Infura-style project id, by chain id
WELL_KNOWN_NETWORKS: dict[str, int] = {
    "mainnet": 1,
    "sepolia": 11155111,
    "holesky": 17000,
}

REGISTRY_ABI: list[dict[str, Any]] = [
    {
        "type": "function",
        "name": "isRevoked",
        "stateMutability": "view",
        "inputs": [
            {"name": "namespace", "type": "address"},
            {"name": "revocationList", "type": "bytes32"},
            {"name": "revocationKey", "type": "bytes32"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
    },
]


class DeploymentAddressError(Exception):
    """Raised when no registry deployment is known for a chain."""


class RevocationQuery(Protocol):
    """A query handle for one registry on one network."""

    async def is_revoked(
        self, namespace: Any, revocation_list: Any, revocation_key: Any
    ) -> bool:
        """Check whether a revocation key is revoked."""
        ...


def infura_url(network: str, project_id: str) -> str:
    """Build the Infura JSON-RPC endpoint of a network."""
    return f"https://{network}.infura.io/v3/{project_id}"


def make_connection(endpoint: Any) -> AsyncWeb3:
    """Turn an endpoint into an AsyncWeb3 instance.

    Args:
        endpoint: An AsyncWeb3, an async provider, or an HTTP(S) RPC URL.

    Returns:
        The AsyncWeb3 connection.
    """
    if isinstance(endpoint, AsyncWeb3):
        return endpoint
    if isinstance(endpoint, AsyncBaseProvider):
        return AsyncWeb3(endpoint)
    if isinstance(endpoint, str) and endpoint.startswith(("http://", "https://")):
        return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(endpoint))
    raise TypeError(f"Unsupported connection: {endpoint!r}")


class RevocationRegistryClient:
    """Reads revocation state from an EthereumRevocationRegistry contract."""

    def __init__(self, connection: Any, address: str) -> None:
        """Initialize the client.

        Args:
            connection: An AsyncWeb3, an async provider, or an RPC URL.
            address: Contract address of the registry.
        """
        self.web3 = make_connection(connection)
        self.address = AsyncWeb3.to_checksum_address(address)
        self.contract = self.web3.eth.contract(address=self.address, abi=REGISTRY_ABI)

    async def is_revoked(
        self, namespace: Any, revocation_list: Any, revocation_key: Any
    ) -> bool:
        """Call isRevoked(namespace, revocationList, revocationKey).

        Transport and contract errors are not caught.
        """
        result = await self.contract.functions.isRevoked(
            namespace, revocation_list, revocation_key
        ).call()
        return bool(result)

    def __repr__(self) -> str:
        return f"RevocationRegistryClient(address={self.address!r})"


class DeploymentAddresses:
    """Canonical registry deployment address per chain id."""

    def __init__(self, deployments: Mapping[int, str] | None = None) -> None:
        self._deployments = {
            int(chain_id): address for chain_id, address in (deployments or {}).items()
        }

    def resolve(self, chain_id: int) -> str:
        """Return the registry address deployed on a chain.

        Raises:
            DeploymentAddressError: If no deployment is known for the chain.
        """
        try:
            return self._deployments[chain_id]
        except KeyError as e:
            raise DeploymentAddressError(
                f"No revocation registry deployment known for chain {chain_id}"
            ) from e

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._deployments
