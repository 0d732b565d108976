import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from codex_title.exceptions import ConfigError, DeploymentNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    network: str
    logic: str
    proxy: str
    new_owner: Optional[str] = None
    # values of HandoverStep, in the order they completed
    handover: List[str] = field(default_factory=list)

    def __post_init__(self):
        # boa hands out Address objects, which safe_dump refuses
        self.logic = str(self.logic)
        self.proxy = str(self.proxy)
        if self.new_owner is not None:
            self.new_owner = str(self.new_owner)

    def mark_done(self, step: str):
        if step not in self.handover:
            self.handover.append(step)


class DeploymentStore:
    """One YAML record per network under `root`."""

    def __init__(self, root):
        self.root = Path(root)

    def path_for(self, network: str) -> Path:
        return self.root / f"{network}.yaml"

    def load(self, network: str) -> Deployment:
        path = self.path_for(network)
        if not path.exists():
            raise DeploymentNotFoundError(network, path)
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        try:
            return Deployment(
                network=data["network"],
                logic=data["logic"],
                proxy=data["proxy"],
                new_owner=data.get("new_owner"),
                handover=list(data.get("handover") or []),
            )
        except KeyError as e:
            raise ConfigError(f"Deployment record {path} is missing {e}") from e

    def save(self, deployment: Deployment) -> Path:
        path = self.path_for(deployment.network)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            yaml.safe_dump(asdict(deployment), sort_keys=False), encoding="utf-8"
        )
        logger.debug("Saved deployment record %s", path)
        return path
