#!/usr/bin/env python3
"""
codex-title command line

Usage:
    codex-title [--config PATH] [--deployments-dir DIR] <command> --network NAME

Commands:
    deploy              Deploy CodexTitle behind a new proxy
    transfer-ownership  Hand logic and proxy ownership to the network's owner
    upgrade             Point the proxy at a new CodexTitle implementation
    audit               Check that pausing blocks every mutating entry point
"""

import argparse
import logging
import os
import sys

import boa
from boa.rpc import EthereumRPC
from eth_account import Account

from codex_title import __version__
from codex_title.access import audit_pausability, failures
from codex_title.constants import DEFAULT_TOKEN_URI_PREFIX
from codex_title.deployers import proxied_title
from codex_title.deployments import DeploymentStore
from codex_title.exceptions import CodexTitleError, ConfigError
from codex_title.migrations import deploy, transfer_ownership, upgrade
from codex_title.networks import NetworkTable

logger = logging.getLogger(__name__)

LOCAL_ACCOUNT_COUNT = 10


def _local_accounts():
    # mirrors a development node: accounts[0] deploys
    return [boa.env.eoa] + [
        boa.env.generate_address(f"account{i}") for i in range(1, LOCAL_ACCOUNT_COUNT)
    ]


def connect(network_config, environ, fork=False):
    """Select the boa environment for a network.

    Returns the deployer address and the node's accounts.
    """
    url = network_config.resolve_rpc_url(environ)
    if url is None:
        logger.info("Using the in-process EVM for %s", network_config.name)
        return boa.env.eoa, _local_accounts()

    accounts = EthereumRPC(url).fetch("eth_accounts", [])
    if fork:
        logger.info("Forking %s from %s", network_config.name, url)
        boa.fork(url)
        return boa.env.eoa, accounts

    key = environ.get(network_config.private_key_env)
    if not key:
        raise ConfigError(
            f"Set ${network_config.private_key_env} to the deployer's private key"
        )
    logger.info("Connecting to %s at %s", network_config.name, url)
    boa.set_network_env(url)
    account = Account.from_key(key)
    boa.env.add_account(account, force_eoa=True)
    return account.address, accounts


def _check_deployed(deployment):
    # records written on an in-process EVM outlive the chain they describe
    if not boa.env.get_code(deployment.proxy):
        raise ConfigError(
            f"Deployment record for {deployment.network!r} points at "
            f"{deployment.proxy}, which has no code on this chain"
        )


def cmd_deploy(args, table, store, environ):
    deployer, _ = connect(table.connection(args.network), environ)
    deployment = deploy(
        args.network, deployer, token_uri_prefix=args.token_uri_prefix, store=store
    )
    print(f"CodexTitle: {deployment.logic}")
    print(f"CodexTitleProxy: {deployment.proxy}")
    return 0


def cmd_transfer_ownership(args, table, store, environ):
    if table.is_dev(args.network):
        transfer_ownership(args.network, None, None, table=table)
        return 0

    # fail on unknown networks before connecting anywhere
    network_config = table.get(args.network)
    deployment = store.load(args.network)
    deployer, accounts = connect(network_config, environ)
    _check_deployed(deployment)
    result = transfer_ownership(
        args.network, deployment, deployer, accounts=accounts, table=table, store=store
    )
    for step in result.executed:
        print(f"transferred: {step.value}")
    for step in result.skipped:
        print(f"already done: {step.value}")
    return 0


def cmd_upgrade(args, table, store, environ):
    deployment = store.load(args.network)
    sender, _ = connect(table.connection(args.network), environ)
    _check_deployed(deployment)
    deployment = upgrade(
        deployment, sender, implementation=args.implementation, store=store
    )
    print(f"CodexTitle: {deployment.logic}")
    return 0


def cmd_audit(args, table, store, environ):
    network_config = table.connection(args.network)
    if args.fork:
        if network_config.is_local:
            raise ConfigError(f"{args.network!r} has no RPC url to fork")
        connect(network_config, environ, fork=True)
        deployment = store.load(args.network)
        _check_deployed(deployment)
        token = proxied_title(deployment.proxy)
        owner = token.owner()
    elif network_config.is_local:
        owner, _ = connect(network_config, environ)
        token = proxied_title(deploy(args.network, owner).proxy)
    else:
        raise ConfigError("Auditing a live network pauses it; use --fork")

    results = audit_pausability(token, owner)
    for result in results:
        print(result)
    return 1 if failures(results) else 0


COMMANDS = {
    "deploy": cmd_deploy,
    "transfer-ownership": cmd_transfer_ownership,
    "upgrade": cmd_upgrade,
    "audit": cmd_audit,
}


def build_parser():
    parser = argparse.ArgumentParser(
        prog="codex-title",
        description="CodexTitle deployment migrations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", "-V", action="version", version=f"codex-title {__version__}")
    parser.add_argument("--config", help="network configuration (YAML)")
    parser.add_argument(
        "--deployments-dir",
        default="deployments",
        help="where deployment records are kept (default: deployments)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("deploy", help="deploy CodexTitle behind a new proxy")
    p.add_argument("--network", required=True)
    p.add_argument("--token-uri-prefix", default=DEFAULT_TOKEN_URI_PREFIX)

    p = subparsers.add_parser("transfer-ownership", help="hand over ownership")
    p.add_argument("--network", required=True)

    p = subparsers.add_parser("upgrade", help="upgrade the proxy's implementation")
    p.add_argument("--network", required=True)
    p.add_argument("--implementation", help="existing CodexTitle address to use")

    p = subparsers.add_parser("audit", help="check pausability of mutating calls")
    p.add_argument("--network", required=True)
    p.add_argument("--fork", action="store_true", help="audit the deployed proxy on a fork")

    return parser


def main(argv=None, environ=None):
    args = build_parser().parse_args(argv)
    environ = os.environ if environ is None else environ

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        table = NetworkTable.load(args.config)
        store = DeploymentStore(args.deployments_dir)
        return COMMANDS[args.command](args, table, store, environ)
    except CodexTitleError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
