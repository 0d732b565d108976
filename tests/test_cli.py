import boa
import pytest

from codex_title.cli import build_parser, main
from codex_title.deployers import CODEX_TITLE_DEPLOYER, CODEX_TITLE_PROXY_DEPLOYER
from codex_title.deployments import Deployment, DeploymentStore


@pytest.fixture(scope="module")
def cold_storage():
    return boa.env.generate_address("cold_storage")


@pytest.fixture()
def config(tmp_path, cold_storage):
    path = tmp_path / "networks.yaml"
    path.write_text(
        "dev_networks: [develop, coverage]\n"
        "networks:\n"
        "  local:\n"
        f"    new_owner: '{cold_storage}'\n"
        "  remote:\n"
        "    rpc_url_env: REMOTE_RPC_URL\n"
        "    new_owner_account: 1\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture()
def run(config, tmp_path):
    def _run(*argv, environ=None):
        return main(
            ["--config", str(config), "--deployments-dir", str(tmp_path / "deployments"), *argv],
            environ=environ or {},
        )

    return _run


def test_deploy_then_transfer_ownership(run, tmp_path, cold_storage, capsys):
    store = DeploymentStore(tmp_path / "deployments")

    assert run("deploy", "--network", "local") == 0
    deployment = store.load("local")
    assert f"CodexTitleProxy: {deployment.proxy}" in capsys.readouterr().out

    assert run("transfer-ownership", "--network", "local") == 0

    deployment = store.load("local")
    assert deployment.new_owner == cold_storage
    assert deployment.handover == ["logic-via-proxy", "logic-direct", "proxy-direct"]
    assert CODEX_TITLE_DEPLOYER.at(deployment.proxy).owner() == cold_storage
    assert CODEX_TITLE_DEPLOYER.at(deployment.logic).owner() == cold_storage
    assert CODEX_TITLE_PROXY_DEPLOYER.at(deployment.proxy).proxyOwner() == cold_storage

    out = capsys.readouterr().out
    assert "transferred: proxy-direct" in out


@pytest.mark.parametrize("network", ["develop", "coverage"])
def test_transfer_ownership_dev_network(run, network, tmp_path):
    assert run("transfer-ownership", "--network", network) == 0
    assert not (tmp_path / "deployments").exists()


def test_transfer_ownership_unknown_network(run, caplog):
    assert run("transfer-ownership", "--network", "mainnet") == 1
    assert "No ownership transfer defined for network 'mainnet'" in caplog.text


def test_transfer_ownership_without_deployment(run, caplog):
    assert run("transfer-ownership", "--network", "local") == 1
    assert "No deployment recorded" in caplog.text


def test_remote_network_needs_rpc_url(run, caplog):
    assert run("deploy", "--network", "remote") == 1
    assert "REMOTE_RPC_URL" in caplog.text


@pytest.mark.parametrize("command", ["transfer-ownership", "upgrade"])
def test_record_without_code(run, tmp_path, command, caplog):
    # left behind by an earlier in-process run
    DeploymentStore(tmp_path / "deployments").save(
        Deployment(
            network="local",
            logic=boa.env.generate_address("gone_logic"),
            proxy=boa.env.generate_address("gone_proxy"),
        )
    )

    assert run(command, "--network", "local") == 1
    assert "has no code" in caplog.text


def test_invalid_dev_networks(tmp_path, caplog):
    config = tmp_path / "networks.yaml"
    config.write_text("dev_networks: develop\nnetworks: {}\n", encoding="utf-8")

    assert main(["--config", str(config), "transfer-ownership", "--network", "develop"]) == 1
    assert "dev_networks" in caplog.text


def test_upgrade(run, tmp_path):
    store = DeploymentStore(tmp_path / "deployments")
    assert run("deploy", "--network", "local") == 0
    old_logic = store.load("local").logic

    assert run("upgrade", "--network", "local") == 0

    deployment = store.load("local")
    assert deployment.logic != old_logic
    assert CODEX_TITLE_PROXY_DEPLOYER.at(deployment.proxy).implementation() == deployment.logic


def test_audit_local(run, capsys):
    assert run("audit", "--network", "develop") == 0
    out = capsys.readouterr().out
    assert out.count(": ok") == 8


def test_audit_live_network_needs_fork(run, caplog):
    assert run("audit", "--network", "remote") == 1
    assert "--fork" in caplog.text


def test_audit_fork_needs_rpc(run):
    assert run("audit", "--network", "local", "--fork") == 1


def test_parser_requires_network():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["deploy"])
