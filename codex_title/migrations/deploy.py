import logging

import boa

from codex_title.constants import DEFAULT_TOKEN_URI_PREFIX
from codex_title.deployers import (
    CODEX_TITLE_DEPLOYER,
    CODEX_TITLE_PROXY_DEPLOYER,
    proxied_title,
)
from codex_title.deployments import Deployment

logger = logging.getLogger(__name__)


def deploy(network, deployer, token_uri_prefix=DEFAULT_TOKEN_URI_PREFIX, store=None):
    """Deploy CodexTitle behind a fresh proxy owned by `deployer`.

    The proxy never runs the CodexTitle constructor, so its storage is
    initialized here. Setting the token URI prefix needs owner permissions,
    which is why this happens before ownership is handed over.
    """
    with boa.env.prank(deployer):
        logic = CODEX_TITLE_DEPLOYER.deploy()
        logger.info("Deployed CodexTitle at %s", logic.address)
        proxy = CODEX_TITLE_PROXY_DEPLOYER.deploy(logic.address)
        logger.info("Deployed CodexTitleProxy at %s", proxy.address)

    title = proxied_title(proxy)
    title.initializeOwnable(deployer, sender=deployer)
    title.setTokenURIPrefix(token_uri_prefix, sender=deployer)
    logger.info("Initialized proxied CodexTitle for owner %s", deployer)

    deployment = Deployment(network=network, logic=logic.address, proxy=proxy.address)
    if store is not None:
        store.save(deployment)
    return deployment
