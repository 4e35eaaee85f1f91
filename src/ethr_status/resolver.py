"""
EthrRevocationRegistry status method.

Routes a credential's status entry to the revocation registry of the network
it names, and reports whether the credential is revoked.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ethr_status.extractor import StatusEntry, extract_status_entry
from ethr_status.registry import (
    WELL_KNOWN_NETWORKS,
    DeploymentAddressError,
    DeploymentAddresses,
    RevocationQuery,
    RevocationRegistryClient,
    infura_url,
)


LOGGER = logging.getLogger(__name__)

STATUS_METHOD = "EthrRevocationRegistry"
NO_STATUS_MESSAGE = "credentialStatus property was not set on the original credential"

ClientFactory = Callable[[Any, str], RevocationQuery]
RouteKey = tuple[str, int]


class ConfigurationError(Exception):
    """Raised when the resolver is configured inconsistently."""


class UnsupportedNetworkError(ConfigurationError):
    """Raised when no query handle is configured for a registry and chain."""


class RegistryAddressError(Exception):
    """Raised when the registry address of a chain cannot be derived."""


@dataclass(frozen=True)
class ChainConfig:
    """A registry deployment reachable through a connection."""

    chain_id: int
    address: str
    connection: Any


@dataclass
class StatusResult:
    """Result of a status check."""

    revoked: bool
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, omitting the message when there is none."""
        if self.message is None:
            return {"revoked": self.revoked}
        return {"revoked": self.revoked, "message": self.message}


def _route_key(address: str, chain_id: int) -> RouteKey:
    # Ethereum addresses are case-insensitive apart from their checksum
    return address.lower(), int(chain_id)


class EthrRevocationRegistry:
    """Checks credential status against EthereumRevocationRegistry contracts.

    Configure with either an Infura-style ``project_id``, which serves every
    network in WELL_KNOWN_NETWORKS, or an explicit list of ``chains``.
    """

    def __init__(
        self,
        project_id: str | None = None,
        registry_address: str | None = None,
        network_name: str | None = None,
        *,
        chains: Iterable[ChainConfig] | None = None,
        default_chain_id: int | None = None,
        default_registry: str | None = None,
        deployments: DeploymentAddresses | Mapping[int, str] | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize the resolver and build its routing table.

        Args:
            project_id: Infura project id (configuration shape 1).
            registry_address: Registry address on the well-known networks.
                Defaults to each network's canonical deployment.
            network_name: Well-known network used when a status entry has no
                chainId, unless default_chain_id is given.
            chains: Explicit registry deployments (configuration shape 2).
            default_chain_id: Network used when a status entry has no chainId.
            default_registry: Registry used when a status entry has no chainId.
            deployments: Canonical registry address per chain id.
            client_factory: Builds a query handle from (connection, address).
                Defaults to RevocationRegistryClient.

        Raises:
            ConfigurationError: If neither or both shapes are given, or the
                default network cannot be determined.
        """
        if isinstance(deployments, DeploymentAddresses):
            self.deployments = deployments
        else:
            self.deployments = DeploymentAddresses(deployments)
        self.client_factory: ClientFactory = client_factory or RevocationRegistryClient

        chains = list(chains) if chains is not None else None
        if project_id and chains:
            raise ConfigurationError(
                "Configure either a project id or a list of chains, not both"
            )
        if project_id:
            chains = self._well_known_chains(project_id, registry_address)
        elif not chains:
            raise ConfigurationError(
                "A project id or at least one chain configuration is required"
            )

        self._routes: Mapping[RouteKey, RevocationQuery] = MappingProxyType(
            self._build_routes(chains)
        )
        self.default_chain_id = self._pick_default_chain(
            chains, default_chain_id, network_name
        )
        self.default_registry = self._pick_default_registry(
            chains, default_registry or registry_address
        )
        LOGGER.debug(
            "Configured %d registry routes, default chain %s at %s",
            len(self._routes),
            self.default_chain_id,
            self.default_registry,
        )

    def _well_known_chains(
        self, project_id: str, registry_address: str | None
    ) -> list[ChainConfig]:
        chains: list[ChainConfig] = []
        for network, chain_id in WELL_KNOWN_NETWORKS.items():
            address = registry_address
            if address is None:
                if chain_id not in self.deployments:
                    LOGGER.debug("No registry deployment for %s, skipping", network)
                    continue
                address = self.deployments.resolve(chain_id)
            chains.append(
                ChainConfig(
                    chain_id=chain_id,
                    address=address,
                    connection=infura_url(network, project_id),
                )
            )
        if not chains:
            raise ConfigurationError(
                "No registry address given and no deployments known for "
                "the well-known networks"
            )
        return chains

    def _build_routes(
        self, chains: list[ChainConfig]
    ) -> dict[RouteKey, RevocationQuery]:
        routes: dict[RouteKey, RevocationQuery] = {}
        for chain in chains:
            key = _route_key(chain.address, chain.chain_id)
            if key in routes:
                raise ConfigurationError(
                    f"Duplicate registry {chain.address} on chain {chain.chain_id}"
                )
            routes[key] = self.client_factory(chain.connection, chain.address)
        return routes

    @staticmethod
    def _pick_default_chain(
        chains: list[ChainConfig],
        default_chain_id: int | None,
        network_name: str | None,
    ) -> int:
        if default_chain_id is not None:
            return int(default_chain_id)
        if network_name:
            if network_name not in WELL_KNOWN_NETWORKS:
                raise ConfigurationError(f"Unknown network: {network_name}")
            return WELL_KNOWN_NETWORKS[network_name]
        chain_ids = {chain.chain_id for chain in chains}
        if len(chain_ids) == 1:
            return chain_ids.pop()
        raise ConfigurationError(
            "Several chains are configured; set default_chain_id or network_name"
        )

    def _pick_default_registry(
        self, chains: list[ChainConfig], default_registry: str | None
    ) -> str | None:
        if default_registry:
            return default_registry
        addresses = {
            chain.address.lower(): chain.address
            for chain in chains
            if chain.chain_id == self.default_chain_id
        }
        if len(addresses) == 1:
            return next(iter(addresses.values()))
        if self.default_chain_id in self.deployments:
            return self.deployments.resolve(self.default_chain_id)
        if addresses:
            raise ConfigurationError(
                f"Several registries are configured on chain "
                f"{self.default_chain_id}; set default_registry"
            )
        # Left unset; lookups without a chainId fail as unsupported
        return None

    def routes(self) -> list[RouteKey]:
        """List the configured (registry address, chain id) pairs."""
        return sorted(self._routes)

    def _lookup(self, registry: str | None, chain_id: int) -> RevocationQuery:
        handle = None
        if registry is not None:
            handle = self._routes.get(_route_key(registry, chain_id))
        if handle is None:
            raise UnsupportedNetworkError(
                f"No revocation registry configured for registry {registry} "
                f"on chain {chain_id}"
            )
        return handle

    def select(self, entry: StatusEntry) -> RevocationQuery:
        """Select the query handle addressed by a status entry.

        Raises:
            RegistryAddressError: If the entry names a chain but no registry,
                and no deployment is known for that chain.
            UnsupportedNetworkError: If no handle is configured for the
                registry and chain.
        """
        if entry.chain_id is None:
            LOGGER.debug("No chainId in status entry, using chain %s", self.default_chain_id)
            return self._lookup(self.default_registry, self.default_chain_id)

        registry = entry.registry
        if registry is None:
            try:
                registry = self.deployments.resolve(entry.chain_id)
            except DeploymentAddressError as e:
                raise RegistryAddressError(
                    f"Cannot determine the registry address for chain {entry.chain_id}"
                ) from e
        return self._lookup(registry, entry.chain_id)

    async def resolve(self, entry: StatusEntry) -> StatusResult:
        """Query the registry addressed by a status entry."""
        handle = self.select(entry)
        revoked = await handle.is_revoked(
            entry.namespace, entry.revocation_list, entry.revocation_key
        )
        return StatusResult(revoked=revoked)

    async def check_status(
        self, credential: Any, did_document: Any = None
    ) -> StatusResult:
        """Check whether a credential has been revoked.

        Args:
            credential: A credential mapping, a JSON string, or a JWT.
            did_document: Resolved DID document of the issuer. Not used.

        Returns:
            The revocation status. A credential without credentialStatus is
            reported as not revoked, with a message.

        Raises:
            MalformedStatusEntryError: If credentialStatus is malformed.
            ConfigurationError: If no registry is configured for the entry.
            RegistryAddressError: If the registry address cannot be derived.
        """
        entry = extract_status_entry(credential)
        if entry is None:
            return StatusResult(revoked=False, message=NO_STATUS_MESSAGE)
        return await self.resolve(entry)

    @property
    def as_status_method(self) -> dict[str, Callable[..., Any]]:
        """The status method keyed by its credentialStatus type."""
        return {STATUS_METHOD: self.check_status}
