"""Resolver configuration."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, model_validator

from ethr_status.resolver import ChainConfig, EthrRevocationRegistry


LOGGER = logging.getLogger(__name__)


class ConfigFileNotFoundError(Exception):
    """Raised on configuration file not found."""


class ChainSettings(BaseModel):
    """A registry deployment and the RPC endpoint of its network."""

    chain_id: int
    address: str
    rpc_url: str


class StatusSettings(BaseModel):
    """Status resolver configuration.

    Either ``project_id`` or ``chains`` must be set.
    """

    project_id: Optional[str] = None
    network_name: Optional[str] = None
    registry_address: Optional[str] = None
    default_chain_id: Optional[int] = None
    default_registry: Optional[str] = None
    chains: List[ChainSettings] = []
    deployments: Dict[int, str] = {}

    @model_validator(mode="after")
    def check_shape(self) -> "StatusSettings":
        """Require exactly one of project_id and chains."""
        if self.project_id and self.chains:
            raise ValueError("project_id and chains are mutually exclusive")
        if not self.project_id and not self.chains:
            raise ValueError("one of project_id or chains is required")
        return self

    @staticmethod
    def search_default_config_locations() -> Path:
        """Find the first readable config file in the default locations."""
        candidates = []
        if env_path := os.environ.get("ETHR_STATUS_CONFIG"):
            candidates.append(env_path)
        candidates.extend(
            (
                "ethr-status.toml",
                os.path.expanduser("~/.config/ethr-status/config.toml"),
                "/etc/ethr-status/config.toml",
            )
        )
        for candidate in candidates:
            path = Path(candidate)
            if not path.is_file():
                continue
            if not os.access(path, os.R_OK):
                continue

            LOGGER.debug("Loading status config from %s", path)
            return path

        raise ConfigFileNotFoundError("Could not find ethr-status configuration")

    @classmethod
    def from_config_file(cls, path: Path | str | None = None) -> "StatusSettings":
        """Load from a config file."""
        if isinstance(path, str):
            path = Path(path)
        elif path is None:
            path = cls.search_default_config_locations()

        with path.open("rb") as f:
            raw = tomllib.load(f)

        return cls.model_validate(raw)

    def build_registry(
        self, client_factory: Optional[Callable[[Any, str], Any]] = None
    ) -> EthrRevocationRegistry:
        """Construct the resolver described by this configuration."""
        chains = [
            ChainConfig(
                chain_id=chain.chain_id,
                address=chain.address,
                connection=chain.rpc_url,
            )
            for chain in self.chains
        ]
        return EthrRevocationRegistry(
            project_id=self.project_id,
            registry_address=self.registry_address,
            network_name=self.network_name,
            chains=chains or None,
            default_chain_id=self.default_chain_id,
            default_registry=self.default_registry,
            deployments=self.deployments,
            client_factory=client_factory,
        )
