"""Hand ownership of a CodexTitle deployment over to its long-term owner.

Three transactions, always in this order:

1. ``logic-via-proxy``: ``transferOwnership`` on CodexTitle as seen through
   the proxy. This is the owner that matters for day to day administration.
2. ``logic-direct``: ``initializeOwnable`` on the logic contract itself. No
   one should talk to it directly, but its own owner slot is set anyway.
3. ``proxy-direct``: ``transferProxyOwnership`` on the proxy. The proxy owner
   decides future upgrades, and once it changes the deployer can no longer
   administer anything, so this goes last.

Steps whose target already belongs to the new owner are skipped, which makes
a rerun after a failure pick up where the previous attempt stopped.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from codex_title.deployers import (
    CODEX_TITLE_DEPLOYER,
    CODEX_TITLE_PROXY_DEPLOYER,
    proxied_title,
)
from codex_title.exceptions import ConfigError, HandoverError
from codex_title.networks import NetworkTable

logger = logging.getLogger(__name__)


class HandoverStep(Enum):
    LOGIC_VIA_PROXY = "logic-via-proxy"
    LOGIC_DIRECT = "logic-direct"
    PROXY_DIRECT = "proxy-direct"


@dataclass
class HandoverResult:
    network: str
    new_owner: Optional[str] = None
    executed: List[HandoverStep] = field(default_factory=list)
    skipped: List[HandoverStep] = field(default_factory=list)

    @property
    def noop(self) -> bool:
        return self.new_owner is None


def _steps(deployment, new_owner, deployer):
    title = proxied_title(deployment.proxy)
    logic = CODEX_TITLE_DEPLOYER.at(deployment.logic)
    proxy = CODEX_TITLE_PROXY_DEPLOYER.at(deployment.proxy)
    return [
        (
            HandoverStep.LOGIC_VIA_PROXY,
            title.owner,
            lambda: title.transferOwnership(new_owner, sender=deployer),
        ),
        (
            HandoverStep.LOGIC_DIRECT,
            logic.owner,
            lambda: logic.initializeOwnable(new_owner, sender=deployer),
        ),
        (
            HandoverStep.PROXY_DIRECT,
            proxy.proxyOwner,
            lambda: proxy.transferProxyOwnership(new_owner, sender=deployer),
        ),
    ]


def transfer_ownership(
    network, deployment, deployer, accounts=(), table=None, store=None
) -> HandoverResult:
    table = table if table is not None else NetworkTable.load()

    if table.is_dev(network):
        logger.info("%s is a development network, ownership stays with %s", network, deployer)
        return HandoverResult(network)

    # raises UnknownNetworkError before anything touches the chain
    new_owner = table.resolve_new_owner(network, accounts)

    if deployment.network != network:
        raise ConfigError(
            f"Deployment record is for {deployment.network!r}, not {network!r}"
        )
    if deployment.new_owner is not None and deployment.new_owner != new_owner:
        raise ConfigError(
            f"Handover on {network!r} was started for {deployment.new_owner}, "
            f"refusing to continue with {new_owner}"
        )
    deployment.new_owner = str(new_owner)

    result = HandoverResult(network, new_owner=new_owner)
    completed = []
    for step, current_owner, transfer in _steps(deployment, new_owner, deployer):
        if current_owner() == new_owner:
            logger.info("Skipping %s, already owned by %s", step.value, new_owner)
            result.skipped.append(step)
        else:
            logger.info("Transferring %s ownership to %s", step.value, new_owner)
            try:
                transfer()
            except Exception as e:
                raise HandoverError(step, completed, e) from e
            result.executed.append(step)

        completed.append(step)
        deployment.mark_done(step.value)
        if store is not None:
            store.save(deployment)

    logger.info("Ownership of %s handed over to %s", deployment.proxy, new_owner)
    return result
