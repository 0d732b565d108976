import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Optional, Sequence

import yaml
from eth_utils import is_address, to_checksum_address

from codex_title.constants import DEFAULT_PRIVATE_KEY_ENV, DEV_NETWORKS
from codex_title.exceptions import ConfigError, UnknownNetworkError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent / "networks.yaml"


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    rpc_url: Optional[str] = None
    rpc_url_env: Optional[str] = None
    new_owner: Optional[str] = None
    new_owner_account: Optional[int] = None
    private_key_env: str = DEFAULT_PRIVATE_KEY_ENV

    @property
    def is_local(self) -> bool:
        """True when the network runs in titanoboa's in-process EVM."""
        return self.rpc_url is None and self.rpc_url_env is None

    def resolve_rpc_url(self, environ=None) -> Optional[str]:
        if self.rpc_url is not None:
            return self.rpc_url
        if self.rpc_url_env is None:
            return None
        environ = os.environ if environ is None else environ
        url = environ.get(self.rpc_url_env)
        if not url:
            raise ConfigError(
                f"Network {self.name!r} reads its RPC url from "
                f"${self.rpc_url_env}, which is not set"
            )
        return url

    def resolve_new_owner(self, accounts: Sequence[str] = ()) -> str:
        if self.new_owner is not None:
            return self.new_owner
        try:
            account = accounts[self.new_owner_account]
        except IndexError:
            raise ConfigError(
                f"Network {self.name!r} wants account #{self.new_owner_account} "
                f"as new owner but the node exposes {len(accounts)} account(s)"
            ) from None
        return to_checksum_address(account)


def _parse_network(name, raw) -> NetworkConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"Network {name!r} must be a mapping")

    unknown = set(raw) - {
        "rpc_url", "rpc_url_env", "new_owner", "new_owner_account", "private_key_env"
    }
    if unknown:
        raise ConfigError(f"Network {name!r} has unknown keys: {sorted(unknown)}")

    new_owner = raw.get("new_owner")
    new_owner_account = raw.get("new_owner_account")
    if (new_owner is None) == (new_owner_account is None):
        raise ConfigError(
            f"Network {name!r} needs exactly one of new_owner or new_owner_account"
        )
    if new_owner is not None:
        if not is_address(new_owner):
            raise ConfigError(f"Network {name!r} has invalid new_owner {new_owner!r}")
        new_owner = to_checksum_address(new_owner)
    if new_owner_account is not None and (
        not isinstance(new_owner_account, int) or new_owner_account < 0
    ):
        raise ConfigError(
            f"Network {name!r} new_owner_account must be a non-negative integer"
        )

    if raw.get("rpc_url") is not None and raw.get("rpc_url_env") is not None:
        raise ConfigError(f"Network {name!r} sets both rpc_url and rpc_url_env")

    return NetworkConfig(
        name=name,
        rpc_url=raw.get("rpc_url"),
        rpc_url_env=raw.get("rpc_url_env"),
        new_owner=new_owner,
        new_owner_account=new_owner_account,
        private_key_env=raw.get("private_key_env") or DEFAULT_PRIVATE_KEY_ENV,
    )


class NetworkTable:
    """Where ownership goes on each network."""

    def __init__(self, networks: Dict[str, NetworkConfig], dev_networks=DEV_NETWORKS):
        self.networks = dict(networks)
        self.dev_networks: FrozenSet[str] = frozenset(dev_networks)
        overlap = self.dev_networks & set(self.networks)
        if overlap:
            raise ConfigError(
                f"Development networks cannot define a handover: {sorted(overlap)}"
            )

    @classmethod
    def from_dict(cls, data) -> "NetworkTable":
        if not isinstance(data, dict):
            raise ConfigError("Network configuration must be a mapping")
        raw_networks = data.get("networks") or {}
        if not isinstance(raw_networks, dict):
            raise ConfigError("'networks' must be a mapping of name to settings")
        networks = {
            str(name): _parse_network(str(name), raw)
            for name, raw in raw_networks.items()
        }
        dev_networks = data.get("dev_networks", DEV_NETWORKS)
        if not isinstance(dev_networks, (list, tuple)) or not all(
            isinstance(n, str) for n in dev_networks
        ):
            raise ConfigError("'dev_networks' must be a list of network names")
        return cls(networks, dev_networks=dev_networks)

    @classmethod
    def load(cls, path=None) -> "NetworkTable":
        path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
        if not path.exists():
            raise ConfigError(f"Network configuration not found: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid network configuration {path}: {e}") from e
        logger.debug("Loaded network configuration from %s", path)
        return cls.from_dict(data or {})

    def is_dev(self, network: str) -> bool:
        return network in self.dev_networks

    def get(self, network: str) -> NetworkConfig:
        try:
            return self.networks[network]
        except KeyError:
            raise UnknownNetworkError(network) from None

    def resolve_new_owner(self, network: str, accounts: Sequence[str] = ()) -> Optional[str]:
        """New owner for `network`, or None on development networks."""
        if self.is_dev(network):
            return None
        return self.get(network).resolve_new_owner(accounts)

    def connection(self, network: str) -> NetworkConfig:
        """Connection settings; development networks run in-process."""
        if self.is_dev(network):
            return NetworkConfig(name=network)
        return self.get(network)
