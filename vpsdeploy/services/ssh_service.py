"""SSH service for executing structured commands on the target host."""

import shlex
import subprocess
import time
from pathlib import Path
from typing import Optional, Sequence

from vpsdeploy.logger import DeployLogger, run_with_progress
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.results import ExecutionResult, SSHResult
from vpsdeploy.models.ssh import SSHConnection


def ssh_failure_hint(error_text: str) -> str:
    """Map common ssh client errors to a remediation hint."""
    lowered = error_text.lower()
    if "no route to host" in lowered:
        return "No route to host. Check VPN/LAN reachability and the server IP."
    if "timed out" in lowered:
        return "SSH timed out. Verify the server is online and port 22 is reachable."
    if "connection refused" in lowered:
        return "SSH connection refused. Confirm the SSH daemon is running and port 22 is open."
    if "permission denied" in lowered:
        return "SSH authentication failed. Verify the key is authorized for this user."
    if "could not resolve hostname" in lowered:
        return "Host resolution failed. Check the server address."
    return ""


class SSHService:
    """Service for SSH operations. Every call opens a new session."""

    def __init__(self, connection: SSHConnection, logger: DeployLogger):
        """
        Initialize SSH service.

        Args:
            connection: Target host and identity
            logger: Logger receiving commands and their output
        """
        self.connection = connection
        self.logger = logger

    @property
    def host(self) -> str:
        return self.connection.host

    def execute(
        self,
        command: RemoteCommand,
        input_text: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> SSHResult:
        """
        Execute a command on the remote host.

        Args:
            command: Structured remote command
            input_text: Optional data written to the command's stdin
            timeout: Optional timeout in seconds (None blocks indefinitely)

        Returns:
            SSHResult with execution details
        """
        rendered = command.render()
        ssh_cmd = self.connection.build_command(rendered)
        self.logger.log_command(f"[{self.connection.connection_string}] {rendered}")

        start_time = time.time()
        try:
            result = subprocess.run(
                ssh_cmd,
                input=input_text,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return SSHResult(
                returncode=124,
                stderr=f"SSH command timed out after {timeout}s",
                host=self.host,
                command=rendered,
                duration_seconds=time.time() - start_time,
            )

        ssh_result = SSHResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            host=self.host,
            command=rendered,
            duration_seconds=time.time() - start_time,
        )
        self.logger.log_output(ssh_result.stdout, "stdout")
        self.logger.log_output(ssh_result.stderr, "stderr")
        return ssh_result

    def succeeds(self, command: RemoteCommand) -> bool:
        """Run a state query and report whether it exited 0."""
        return self.execute(command).is_success

    def probe(self, marker: str, connect_timeout: int) -> SSHResult:
        """
        Open a non-interactive session with a bounded connection timeout.

        Args:
            marker: Text echoed back by the remote shell
            connect_timeout: Connection establishment timeout in seconds

        Returns:
            SSHResult of the echo command
        """
        command = RemoteCommand.of("echo", marker)
        ssh_cmd = self.connection.build_command(command.render(), connect_timeout=connect_timeout)
        result = run_with_progress(
            self.logger,
            ssh_cmd,
            f"Opening SSH session to {self.connection.connection_string}",
            timeout=connect_timeout * 3,
        )
        return SSHResult(
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
            host=self.host,
            command=command.render(),
        )

    def write_file(self, path: str, content: str, sudo: bool = True) -> SSHResult:
        """Write content to a remote file through tee's stdin."""
        command = RemoteCommand.of("tee", path, sudo=sudo)
        return self.execute(command, input_text=content)

    def read_file(self, path: str, sudo: bool = True) -> Optional[str]:
        """Read a remote file, or None if it cannot be read."""
        result = self.execute(RemoteCommand.of("cat", path, sudo=sudo))
        if result.is_failure:
            return None
        return result.stdout

    def push_directory(self, local_dir: Path, remote_dir: str, excludes: Sequence[str] = ()) -> ExecutionResult:
        """
        Mirror a local directory into a remote directory with rsync.

        Args:
            local_dir: Local source directory
            remote_dir: Remote destination directory
            excludes: Patterns excluded from the transfer

        Returns:
            ExecutionResult of the rsync run
        """
        remote_shell = shlex.join(["ssh", *self.connection.ssh_options()])
        rsync_cmd = ["rsync", "-az", "-e", remote_shell]
        for pattern in excludes:
            rsync_cmd.extend(["--exclude", pattern])
        # Trailing slashes copy the directory contents, not the directory itself
        rsync_cmd.append(f"{str(local_dir).rstrip('/')}/")
        rsync_cmd.append(f"{self.connection.connection_string}:{remote_dir.rstrip('/')}/")
        return run_with_progress(self.logger, rsync_cmd, "Transferring project files")

    def docker_logs(self, container_name: str, tail: int) -> SSHResult:
        """Fetch the last lines of a container's logs."""
        return self.execute(RemoteCommand.of("docker", "logs", "--tail", str(tail), container_name))
