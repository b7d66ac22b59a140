import subprocess

import pytest

from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.ssh import SSHConfig, SSHConnection
from vpsdeploy.services import ssh_service
from vpsdeploy.services.ssh_service import SSHService


class Recorder:
    def __init__(self, returncode=0, stdout="", stderr=""):
        self.calls = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


@pytest.fixture
def service(logger, tmp_path):
    connection = SSHConnection(host="203.0.113.10", config=SSHConfig(key_path=str(tmp_path / "key"), user="deploy"))
    return SSHService(connection, logger)


def test_execute_sends_rendered_command(service, monkeypatch):
    recorder = Recorder(stdout="ok\n")
    monkeypatch.setattr(ssh_service.subprocess, "run", recorder)

    result = service.execute(RemoteCommand.of("mkdir", "-p", "/home/deploy/my app"))

    [(cmd, kwargs)] = recorder.calls
    assert cmd[0] == "ssh"
    assert cmd[-2] == "deploy@203.0.113.10"
    assert cmd[-1] == "mkdir -p '/home/deploy/my app'"
    assert "ConnectTimeout=10" not in cmd
    assert result.is_success
    assert result.stdout == "ok\n"
    assert result.host == "203.0.113.10"


def test_write_file_streams_content_through_stdin(service, monkeypatch):
    recorder = Recorder()
    monkeypatch.setattr(ssh_service.subprocess, "run", recorder)

    service.write_file("/etc/nginx/sites-available/app", "server {}\n")

    [(cmd, kwargs)] = recorder.calls
    assert cmd[-1] == "sudo tee /etc/nginx/sites-available/app"
    assert kwargs["input"] == "server {}\n"


def test_read_file_returns_none_on_failure(service, monkeypatch):
    monkeypatch.setattr(ssh_service.subprocess, "run", Recorder(returncode=1, stderr="No such file"))
    assert service.read_file("/missing") is None


def test_timeout_maps_to_124(service, monkeypatch):
    def slow(cmd, **kwargs):
        raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

    monkeypatch.setattr(ssh_service.subprocess, "run", slow)
    result = service.execute(RemoteCommand.of("sleep", "100"), timeout=1)
    assert result.returncode == 124


def test_push_directory_builds_rsync_command(service, monkeypatch, tmp_path):
    captured = {}

    def fake_run(logger, command, description, cwd=None, timeout=None):
        captured["command"] = list(command)
        from vpsdeploy.models.results import ExecutionResult

        return ExecutionResult(returncode=0)

    monkeypatch.setattr(ssh_service, "run_with_progress", fake_run)
    service.push_directory(tmp_path / "WebApp", "/home/deploy/WebApp", (".git", "node_modules"))

    command = captured["command"]
    assert command[:3] == ["rsync", "-az", "-e"]
    assert command[3].startswith("ssh -i ")
    assert "BatchMode=yes" in command[3]
    assert command[command.index("--exclude") + 1] == ".git"
    assert command[-2] == f"{tmp_path / 'WebApp'}/"
    assert command[-1] == "deploy@203.0.113.10:/home/deploy/WebApp/"
    assert "--delete" not in command


def test_probe_sets_connect_timeout(service, monkeypatch):
    captured = {}

    def fake_run(logger, command, description, cwd=None, timeout=None):
        captured["command"] = list(command)
        from vpsdeploy.models.results import ExecutionResult

        return ExecutionResult(returncode=0, stdout="VPSDEPLOY_SSH_OK\n")

    monkeypatch.setattr(ssh_service, "run_with_progress", fake_run)
    result = service.probe("VPSDEPLOY_SSH_OK", connect_timeout=10)

    assert "ConnectTimeout=10" in captured["command"]
    assert captured["command"][-1] == "echo VPSDEPLOY_SSH_OK"
    assert result.is_success
