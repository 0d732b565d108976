import boa
import pytest

from codex_title.deployers import CODEX_TITLE_DEPLOYER, proxied_title
from codex_title.metadata import hash_metadata
from codex_title.migrations import deploy
from tests.utils.constants import PROVIDER_ID, PROVIDER_METADATA_ID


@pytest.fixture(scope="module")
def creator():
    return boa.env.generate_address("creator")


@pytest.fixture(scope="module")
def another():
    return boa.env.generate_address("another")


@pytest.fixture(scope="module")
def first_token_metadata():
    return hash_metadata("First token", "This is the first token", "asdf")


@pytest.fixture()
def codex_title(creator, first_token_metadata):
    """Fresh CodexTitle owned by `creator`, holding token 0."""
    with boa.env.prank(creator):
        token = CODEX_TITLE_DEPLOYER.deploy()
        token.mint(creator, *first_token_metadata, PROVIDER_ID, PROVIDER_METADATA_ID)
    return token


@pytest.fixture()
def paused_codex_title(codex_title, creator):
    with boa.env.prank(creator):
        codex_title.pause()
    assert codex_title.paused()
    yield codex_title
    with boa.env.prank(creator):
        codex_title.unpause()


@pytest.fixture(scope="module")
def deployer():
    return boa.env.generate_address("deployer")


@pytest.fixture()
def deployment(deployer):
    return deploy("staging", deployer)


@pytest.fixture()
def proxied(deployment):
    return proxied_title(deployment.proxy)
