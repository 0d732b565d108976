class CodexTitleError(Exception):
    """Base class for errors raised by codex_title."""


class ConfigError(CodexTitleError):
    pass


class UnknownNetworkError(CodexTitleError):
    def __init__(self, network):
        super().__init__(f"No ownership transfer defined for network {network!r}")
        self.network = network


class DeploymentNotFoundError(CodexTitleError):
    def __init__(self, network, path):
        super().__init__(f"No deployment recorded for network {network!r} at {path}")
        self.network = network
        self.path = path


class HandoverError(CodexTitleError):
    """An ownership handover step failed part way through the sequence."""

    def __init__(self, step, completed, cause):
        done = ", ".join(s.value for s in completed) or "none"
        super().__init__(
            f"Ownership handover failed at step {step.value!r} "
            f"(completed: {done}): {cause}"
        )
        self.step = step
        self.completed = list(completed)
        self.cause = cause
