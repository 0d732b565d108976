import boa

from tests.utils.constants import FIRST_TOKEN_ID
from tests.utils.mocks import RECEIVER_CODE


def test_revert_when_paused(paused_codex_title, creator, another):
    with boa.reverts("pausable: paused"):
        paused_codex_title.safeTransferFrom(creator, another, FIRST_TOKEN_ID, sender=creator)

    assert paused_codex_title.balanceOf(creator) == 1
    assert paused_codex_title.balanceOf(another) == 0


def test_default_behavior(codex_title, creator, another):
    codex_title.safeTransferFrom(creator, another, FIRST_TOKEN_ID, sender=creator)

    assert codex_title.balanceOf(another) == 1
    assert codex_title.balanceOf(creator) == 0


def test_transfer_to_receiver(codex_title, creator):
    receiver = boa.loads(RECEIVER_CODE, True)

    codex_title.safeTransferFrom(creator, receiver.address, FIRST_TOKEN_ID, sender=creator)

    assert codex_title.ownerOf(FIRST_TOKEN_ID) == receiver.address
    assert receiver.last_data() == b""


def test_revert_transfer_to_non_receiver(codex_title, creator):
    receiver = boa.loads(RECEIVER_CODE, False)

    with boa.reverts("erc721: transfer to non receiver"):
        codex_title.safeTransferFrom(
            creator, receiver.address, FIRST_TOKEN_ID, sender=creator
        )
