"""Remote host reachability and SSH authentication checks."""

from vpsdeploy.constants import (
    PING_COUNT,
    PING_WAIT_SECONDS,
    SSH_CONNECT_TIMEOUT,
    SSH_PROBE_MARKER,
    ExitCode,
)
from vpsdeploy.exceptions import ConnectivityError
from vpsdeploy.logger import DeployLogger, run_with_progress
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.services.ssh_service import SSHService, ssh_failure_hint


class ConnectivityProber:
    """Runs the best-effort ping and the mandatory SSH session test."""

    def __init__(self, config: DeploymentConfig, ssh: SSHService, logger: DeployLogger):
        self.config = config
        self.ssh = ssh
        self.logger = logger

    def ping(self) -> bool:
        """ICMP may be filtered, so a failed ping is only a warning."""
        self.logger.info(f"Testing connectivity to {self.config.server_ip}...")
        result = run_with_progress(
            self.logger,
            ["ping", "-c", str(PING_COUNT), "-W", str(PING_WAIT_SECONDS), self.config.server_ip],
            "Pinging server",
        )
        if result.is_success:
            self.logger.success("Server is reachable via ping")
            return True
        self.logger.warning("Server did not respond to ping (may be blocked)")
        return False

    def check_ssh(self) -> None:
        """
        Open a non-interactive authenticated session.

        Raises:
            ConnectivityError: Authentication or connection failed (exit code 40)
        """
        self.logger.info("Testing SSH connection...")
        result = self.ssh.probe(SSH_PROBE_MARKER, connect_timeout=SSH_CONNECT_TIMEOUT)
        if result.is_failure or SSH_PROBE_MARKER not in result.stdout:
            detail = result.stderr.strip()
            hint = ssh_failure_hint(detail)
            context = " ".join(part for part in (detail, hint) if part) or None
            raise ConnectivityError(
                "Failed to establish SSH connection. Please check credentials and SSH key",
                context=context,
                exit_code=ExitCode.SSH_CONNECTION_FAILED,
            )
        self.logger.success("SSH connection established successfully")

    def check(self) -> None:
        """Run both connectivity checks in order."""
        self.logger.step("Step 4: Testing SSH Connection")
        self.ping()
        self.check_ssh()
