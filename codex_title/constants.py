# The handover is a no-op on these networks: the deployer keeps ownership.
DEV_NETWORKS = ("develop", "coverage")

DEFAULT_TOKEN_URI_PREFIX = "https://codex-viewer.com/api/token-metadata/"
DEFAULT_PRIVATE_KEY_ENV = "CODEX_DEPLOYER_KEY"
