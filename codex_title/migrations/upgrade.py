import logging

import boa

from codex_title.deployers import CODEX_TITLE_DEPLOYER, CODEX_TITLE_PROXY_DEPLOYER
from codex_title.migrations.transfer_ownership import HandoverStep

logger = logging.getLogger(__name__)


def upgrade(deployment, sender, implementation=None, store=None):
    """Point the proxy at `implementation`, deploying a new CodexTitle if omitted.

    Only the proxy owner may upgrade, so this has to run before the
    ownership handover or be signed by the new owner.
    """
    if implementation is None:
        with boa.env.prank(sender):
            implementation = CODEX_TITLE_DEPLOYER.deploy().address
        logger.info("Deployed CodexTitle at %s", implementation)

    proxy = CODEX_TITLE_PROXY_DEPLOYER.at(deployment.proxy)
    proxy.upgradeTo(implementation, sender=sender)
    logger.info("Upgraded proxy %s to %s", deployment.proxy, implementation)

    deployment.logic = str(implementation)
    # the new logic contract's own ownership has not been handed over yet
    deployment.handover = [
        s for s in deployment.handover if s != HandoverStep.LOGIC_DIRECT.value
    ]
    if store is not None:
        store.save(deployment)
    return deployment
