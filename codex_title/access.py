"""Check that pausing a CodexTitle blocks every mutating entry point.

Each check runs in its own snapshot of the chain, so auditing a live
contract on a fork leaves it exactly as it was found.
"""

import logging
from dataclasses import dataclass
from typing import List

import boa

from codex_title.metadata import hash_metadata

logger = logging.getLogger(__name__)

MINT = "mint"
TRANSFER_FROM = "transferFrom"
SAFE_TRANSFER_FROM = "safeTransferFrom"
SAFE_TRANSFER_FROM_WITH_DATA = "safeTransferFromWithData"

ENTRY_POINTS = (MINT, TRANSFER_FROM, SAFE_TRANSFER_FROM, SAFE_TRANSFER_FROM_WITH_DATA)

AUDIT_METADATA = hash_metadata("Access audit", "Minted by the access audit", b"codex")
AUDIT_PROVIDER_ID = "1"
AUDIT_PROVIDER_METADATA_ID = "10"
# forty zero bytes, the same payload as an empty Uint32Array(10)
AUDIT_DATA = bytes(40)


@dataclass(frozen=True)
class CheckResult:
    entry_point: str
    paused: bool
    passed: bool
    detail: str = ""

    def __str__(self):
        state = "paused" if self.paused else "unpaused"
        status = "ok" if self.passed else "FAILED"
        return f"{self.entry_point} ({state}): {status} {self.detail}".rstrip()


def _mint(token, owner, to):
    return token.mint(
        to, *AUDIT_METADATA, AUDIT_PROVIDER_ID, AUDIT_PROVIDER_METADATA_ID, sender=owner
    )


def _invoke(token, entry_point, owner, recipient, token_id):
    if entry_point == MINT:
        _mint(token, owner, recipient)
    elif entry_point == TRANSFER_FROM:
        token.transferFrom(owner, recipient, token_id, sender=owner)
    elif entry_point == SAFE_TRANSFER_FROM:
        token.safeTransferFrom(owner, recipient, token_id, sender=owner)
    elif entry_point == SAFE_TRANSFER_FROM_WITH_DATA:
        token.safeTransferFrom(owner, recipient, token_id, AUDIT_DATA, sender=owner)
    else:
        raise ValueError(f"Unknown entry point {entry_point!r}")


def check_entry_point(token, owner, recipient, entry_point, paused) -> CheckResult:
    """Call `entry_point` with the contract paused or not and judge the outcome.

    `owner` must own the contract, since it is the one pausing it. Paused,
    the call has to revert and leave balances alone. Unpaused, it has to
    move exactly one token to `recipient`.
    """
    with boa.env.anchor():
        if token.paused():
            token.unpause(sender=owner)
        token_id = _mint(token, owner, owner)
        before = (token.balanceOf(owner), token.balanceOf(recipient))

        if paused:
            token.pause(sender=owner)

        try:
            _invoke(token, entry_point, owner, recipient, token_id)
            reverted = False
        except boa.BoaError:
            reverted = True

        after = (token.balanceOf(owner), token.balanceOf(recipient))

    if paused:
        if not reverted:
            return CheckResult(entry_point, paused, False, "call went through while paused")
        if after != before:
            return CheckResult(entry_point, paused, False, f"balances moved {before} -> {after}")
        return CheckResult(entry_point, paused, True)

    if reverted:
        return CheckResult(entry_point, paused, False, "call reverted while unpaused")
    owner_delta = 0 if entry_point == MINT else -1
    expected = (before[0] + owner_delta, before[1] + 1)
    if after != expected:
        return CheckResult(
            entry_point, paused, False, f"expected balances {expected}, got {after}"
        )
    return CheckResult(entry_point, paused, True)


def audit_pausability(token, owner, recipient=None) -> List[CheckResult]:
    if recipient is None:
        recipient = boa.env.generate_address("access_audit_recipient")

    results = []
    for entry_point in ENTRY_POINTS:
        for paused in (True, False):
            result = check_entry_point(token, owner, recipient, entry_point, paused)
            if result.passed:
                logger.info("%s", result)
            else:
                logger.warning("%s", result)
            results.append(result)
    return results


def failures(results):
    return [r for r in results if not r.passed]
