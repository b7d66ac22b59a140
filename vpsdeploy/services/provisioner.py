"""Idempotent provisioning of Docker, a compose tool and Nginx on the target host."""

from typing import Optional

from vpsdeploy.constants import (
    COMPOSE_BINARY_PATH,
    COMPOSE_RELEASE_URL,
    DOCKER_INSTALL_SCRIPT_PATH,
    DOCKER_INSTALL_SCRIPT_URL,
    ExitCode,
)
from vpsdeploy.exceptions import ProvisioningError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.models.environment import (
    COMPOSE_PLUGIN,
    COMPOSE_STANDALONE,
    ComposeTool,
    RemoteEnvironment,
)
from vpsdeploy.models.results import SSHResult
from vpsdeploy.services.ssh_service import SSHService

MANAGED_SERVICES = ("docker", "nginx")


def is_installed(ssh: SSHService, binary: str) -> bool:
    """Check whether a binary is on the remote PATH."""
    return ssh.succeeds(RemoteCommand.of("command", "-v", binary))


def detect_compose_tool(ssh: SSHService) -> Optional[ComposeTool]:
    """Prefer the compose plugin, fall back to the standalone binary."""
    if ssh.succeeds(RemoteCommand.of(*COMPOSE_PLUGIN.argv, "version")):
        return COMPOSE_PLUGIN
    if is_installed(ssh, "docker-compose"):
        return COMPOSE_STANDALONE
    return None


class EnvironmentProvisioner:
    """
    Brings the target host to the desired state.

    Every step queries the current state and only applies what is missing, so
    re-running against a provisioned host changes nothing beyond the package
    index refresh and the version check.
    """

    def __init__(self, config: DeploymentConfig, ssh: SSHService, logger: DeployLogger):
        self.config = config
        self.ssh = ssh
        self.logger = logger

    def _require(self, command: RemoteCommand, message: str, exit_code: ExitCode) -> SSHResult:
        result = self.ssh.execute(command)
        if result.is_failure:
            raise ProvisioningError(message, context=result.stderr.strip() or command.render(), exit_code=exit_code)
        return result

    def provision(self) -> RemoteEnvironment:
        """
        Provision the host.

        Returns:
            RemoteEnvironment describing the installed tooling

        Raises:
            ProvisioningError: With the exit code of the failing step (50-55)
        """
        self.logger.step("Step 5: Preparing Remote Environment")

        self.update_package_index()
        self.ensure_docker()
        compose = self.ensure_compose()
        self.ensure_nginx()
        self.configure_services()
        environment = self.verify(compose)

        self.logger.success("Remote environment prepared successfully")
        return environment

    def update_package_index(self) -> None:
        self.logger.info("Updating system packages...")
        self._require(
            RemoteCommand.of("apt-get", "update", "-y", sudo=True),
            "Failed to update packages",
            ExitCode.PACKAGE_UPDATE_FAILED,
        )

    def ensure_docker(self) -> None:
        self.logger.info("Installing Docker...")
        if is_installed(self.ssh, "docker"):
            self.logger.info("Docker is already installed")
            return

        self._require(
            RemoteCommand.of("curl", "-fsSL", DOCKER_INSTALL_SCRIPT_URL, "-o", DOCKER_INSTALL_SCRIPT_PATH),
            "Failed to install Docker",
            ExitCode.DOCKER_INSTALL_FAILED,
        )
        self._require(
            RemoteCommand.of("sh", DOCKER_INSTALL_SCRIPT_PATH, sudo=True),
            "Failed to install Docker",
            ExitCode.DOCKER_INSTALL_FAILED,
        )
        self.ssh.execute(RemoteCommand.of("rm", "-f", DOCKER_INSTALL_SCRIPT_PATH))
        self.logger.success("Docker installed successfully")

    def ensure_compose(self) -> ComposeTool:
        self.logger.info("Installing Docker Compose...")
        compose = detect_compose_tool(self.ssh)
        if compose is not None:
            self.logger.info(f"Docker Compose is already installed ({' '.join(compose.argv)})")
            return compose

        system = self._require(
            RemoteCommand.of("uname", "-s"), "Failed to install Docker Compose", ExitCode.COMPOSE_INSTALL_FAILED
        ).stdout.strip()
        machine = self._require(
            RemoteCommand.of("uname", "-m"), "Failed to install Docker Compose", ExitCode.COMPOSE_INSTALL_FAILED
        ).stdout.strip()
        url = COMPOSE_RELEASE_URL.format(system=system, machine=machine)

        self._require(
            RemoteCommand.of("curl", "-fsSL", "-o", COMPOSE_BINARY_PATH, url, sudo=True),
            "Failed to install Docker Compose",
            ExitCode.COMPOSE_INSTALL_FAILED,
        )
        self._require(
            RemoteCommand.of("chmod", "+x", COMPOSE_BINARY_PATH, sudo=True),
            "Failed to install Docker Compose",
            ExitCode.COMPOSE_INSTALL_FAILED,
        )

        compose = detect_compose_tool(self.ssh)
        if compose is None:
            raise ProvisioningError(
                "Failed to install Docker Compose",
                context=f"{COMPOSE_BINARY_PATH} is not on the remote PATH",
                exit_code=ExitCode.COMPOSE_INSTALL_FAILED,
            )
        self.logger.success("Docker Compose installed successfully")
        return compose

    def ensure_nginx(self) -> None:
        self.logger.info("Installing Nginx...")
        if is_installed(self.ssh, "nginx"):
            self.logger.info("Nginx is already installed")
            return

        self._require(
            RemoteCommand.of("apt-get", "install", "-y", "nginx", sudo=True),
            "Failed to install Nginx",
            ExitCode.NGINX_INSTALL_FAILED,
        )
        self.logger.success("Nginx installed successfully")

    def configure_services(self) -> None:
        """Group membership and enablement are best-effort; starting is not."""
        self.logger.info("Configuring Docker permissions...")
        best_effort = [RemoteCommand.of("usermod", "-aG", "docker", self.config.ssh_user, sudo=True)]
        best_effort.extend(RemoteCommand.of("systemctl", "enable", service, sudo=True) for service in MANAGED_SERVICES)
        for command in best_effort:
            result = self.ssh.execute(command)
            if result.is_failure:
                self.logger.log(f"Ignored failure: {command.render()}", "DEBUG")

        for service in MANAGED_SERVICES:
            if self.ssh.succeeds(RemoteCommand.of("systemctl", "is-active", "--quiet", service)):
                continue
            self._require(
                RemoteCommand.of("systemctl", "start", service, sudo=True),
                f"Failed to start {service}",
                ExitCode.SERVICE_START_FAILED,
            )
            self.logger.info(f"Started {service}")

    def verify(self, compose: ComposeTool) -> RemoteEnvironment:
        self.logger.info("Verifying installations...")
        message = "Failed to verify installations"
        code = ExitCode.INSTALL_VERIFICATION_FAILED

        docker_version = self._require(RemoteCommand.of("docker", "--version"), message, code).output
        compose_version = self._require(RemoteCommand.of(*compose.argv, "version"), message, code).output
        # nginx -v prints to stderr
        nginx_version = self._require(RemoteCommand.of("nginx", "-v"), message, code).output

        for line in (docker_version, compose_version, nginx_version):
            if line:
                self.logger.info(line.splitlines()[0])

        return RemoteEnvironment(
            compose=compose,
            docker_version=docker_version,
            compose_version=compose_version,
            nginx_version=nginx_version,
        )
