import pytest
from click.testing import CliRunner
from rich.prompt import Prompt

from tests.conftest import FakeHost, FakeSSH
from vpsdeploy import __version__
from vpsdeploy.base import base_command
from vpsdeploy.commands import deploy as deploy_module
from vpsdeploy.main import cli
from vpsdeploy.models.results import ExecutionResult
from vpsdeploy.services import connectivity, deployment_executor, deployment_validator


class FakeResponse:
    status_code = 200


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(ssh_key, tmp_path):
    return {
        "VPSDEPLOY_REPO_URL": "https://github.com/acme/WebApp.git",
        "VPSDEPLOY_BRANCH": "main",
        "VPSDEPLOY_SSH_USER": "deploy",
        "VPSDEPLOY_SERVER_IP": "203.0.113.10",
        "VPSDEPLOY_SSH_KEY": str(ssh_key),
        "VPSDEPLOY_APP_PORT": "3000",
        "VPSDEPLOY_WORKSPACE": str(tmp_path / "workspace"),
    }


@pytest.fixture
def token_prompt(monkeypatch):
    monkeypatch.setattr(Prompt, "ask", lambda question, **kwargs: "ghp_secret123")


@pytest.fixture
def fake_host(monkeypatch):
    host = FakeHost.provisioned()
    monkeypatch.setattr(base_command, "SSHService", lambda connection, logger: FakeSSH(host, logger))
    return host


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_options(runner):
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for option in ("--cleanup", "--env-file", "--log-dir", "--verbose"):
        assert option in result.output


def test_invalid_ip_exits_14(runner, env, token_prompt, tmp_path):
    env["VPSDEPLOY_SERVER_IP"] = "999.1.1.1"
    result = runner.invoke(cli, ["--log-dir", str(tmp_path / "logs")], env=env)

    assert result.exit_code == 14
    [log_file] = (tmp_path / "logs").glob("deploy_*.log")
    content = log_file.read_text()
    assert "[ERROR] Invalid IP address format" in content
    assert "Step 1: Collecting Deployment Parameters" in content
    assert "exit code 14" in content


def test_invalid_port_exits_17(runner, env, token_prompt, tmp_path):
    env["VPSDEPLOY_APP_PORT"] = "65536"
    result = runner.invoke(cli, ["--log-dir", str(tmp_path)], env=env)
    assert result.exit_code == 17


def test_interrupt_exits_130(runner, env, tmp_path, monkeypatch):
    def interrupted(question, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(Prompt, "ask", interrupted)
    result = runner.invoke(cli, ["--log-dir", str(tmp_path)], env=env)
    assert result.exit_code == 130


def test_cleanup_on_empty_host_exits_0(runner, env, token_prompt, tmp_path, monkeypatch):
    host = FakeHost()
    monkeypatch.setattr(base_command, "SSHService", lambda connection, logger: FakeSSH(host, logger))

    result = runner.invoke(cli, ["--cleanup", "--log-dir", str(tmp_path)], env=env)

    assert result.exit_code == 0
    assert host.ran("rm", "-rf", "/home/deploy/WebApp")


def test_full_deploy_pipeline(runner, env, token_prompt, fake_host, tmp_path, monkeypatch):
    def fake_sync(self):
        work_dir = self.config.work_dir
        work_dir.mkdir(parents=True, exist_ok=True)
        (work_dir / "Dockerfile").write_text("FROM node:20\n")
        return work_dir

    monkeypatch.setattr(deploy_module.RepositorySynchronizer, "ensure_present", fake_sync)
    monkeypatch.setattr(connectivity, "run_with_progress", lambda *args, **kwargs: ExecutionResult(returncode=0))
    monkeypatch.setattr(deployment_executor.time, "sleep", lambda seconds: None)
    monkeypatch.setattr(deployment_validator.requests, "get", lambda url, timeout=None: FakeResponse())

    result = runner.invoke(cli, ["--log-dir", str(tmp_path / "logs")], env=env)

    assert result.exit_code == 0, result.output
    assert [c.name for c in fake_host.running_containers()] == ["WebApp"]
    assert fake_host.links["/etc/nginx/sites-enabled/WebApp"] == "/etc/nginx/sites-available/WebApp"
    [log_file] = (tmp_path / "logs").glob("deploy_*.log")
    content = log_file.read_text()
    assert "Status: SUCCESS" in content
    assert "ghp_secret123" not in content


def test_missing_descriptor_stops_before_remote_work(runner, env, token_prompt, fake_host, tmp_path, monkeypatch):
    def empty_sync(self):
        self.config.work_dir.mkdir(parents=True, exist_ok=True)
        return self.config.work_dir

    monkeypatch.setattr(deploy_module.RepositorySynchronizer, "ensure_present", empty_sync)

    result = runner.invoke(cli, ["--log-dir", str(tmp_path)], env=env)

    assert result.exit_code == 30
    assert fake_host.history == []


def test_cleanup_with_unnamed_repository_touches_nothing(runner, env, token_prompt, fake_host, tmp_path):
    env["VPSDEPLOY_REPO_URL"] = "https://github.com/acme/.git"

    result = runner.invoke(cli, ["--cleanup", "--log-dir", str(tmp_path)], env=env)

    assert result.exit_code == 10
    assert fake_host.history == []
