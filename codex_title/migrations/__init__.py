from codex_title.migrations.deploy import deploy
from codex_title.migrations.transfer_ownership import (
    HandoverResult,
    HandoverStep,
    transfer_ownership,
)
from codex_title.migrations.upgrade import upgrade

__all__ = [
    "deploy",
    "transfer_ownership",
    "upgrade",
    "HandoverResult",
    "HandoverStep",
]
