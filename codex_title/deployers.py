from pathlib import Path

import boa

CONTRACTS_DIR = Path(__file__).resolve().parent / "contracts"

CODEX_TITLE_DEPLOYER = boa.load_partial(str(CONTRACTS_DIR / "CodexTitle.vy"))
CODEX_TITLE_PROXY_DEPLOYER = boa.load_partial(
    str(CONTRACTS_DIR / "CodexTitleProxy.vy")
)


def proxied_title(proxy):
    """CodexTitle interface over the proxy's address."""
    return CODEX_TITLE_DEPLOYER.at(getattr(proxy, "address", proxy))
