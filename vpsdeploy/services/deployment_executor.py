"""Transfers the project and (re)starts its containers on the target host."""

import time

from rich.text import Text

from vpsdeploy.constants import (
    CONTAINER_SETTLE_SECONDS,
    LOG_TAIL_LINES,
    RSYNC_EXCLUDES,
    ExitCode,
)
from vpsdeploy.exceptions import DeploymentError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.config import BuildDescriptor, DeploymentConfig
from vpsdeploy.models.environment import ComposeTool, RemoteEnvironment
from vpsdeploy.models.results import SSHResult
from vpsdeploy.services.ssh_service import SSHService


def container_name_filter(name: str) -> str:
    """Docker name filter matching exactly one container name."""
    return f"name=^/{name}$"


def list_project_containers(ssh: SSHService, name: str, running_only: bool = False) -> list[str]:
    """IDs of containers whose name is exactly ``name``."""
    argv = ["docker", "ps", "-q", "--filter", container_name_filter(name)]
    if running_only:
        argv.extend(["--filter", "status=running"])
    else:
        argv.append("--all")
    result = ssh.execute(RemoteCommand.of(*argv))
    if result.is_failure:
        return []
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


class DeploymentExecutor:
    """
    Mirrors the working copy to the host and starts the project.

    The previous deployment is always torn down before the new one starts,
    so re-running converges to a single instance.
    """

    def __init__(
        self,
        config: DeploymentConfig,
        ssh: SSHService,
        logger: DeployLogger,
        settle_seconds: float = CONTAINER_SETTLE_SECONDS,
    ):
        self.config = config
        self.ssh = ssh
        self.logger = logger
        self.settle_seconds = settle_seconds

    def deploy(self, descriptor: BuildDescriptor, environment: RemoteEnvironment) -> None:
        """
        Run the deployment steps in order.

        Raises:
            DeploymentError: With the exit code of the failing step (60-64)
        """
        self.logger.step("Step 6: Deploying Dockerized Application")

        self.create_remote_dir()
        self.transfer_files()
        self.teardown_previous(environment.compose)

        if descriptor.is_compose:
            self.start_compose_stack(descriptor, environment.compose)
        else:
            self.start_single_container()

        self.show_logs(descriptor, environment.compose)
        self.logger.success("Application deployed successfully")

    def _require(self, command: RemoteCommand, message: str, exit_code: ExitCode) -> SSHResult:
        result = self.ssh.execute(command)
        if result.is_failure:
            raise DeploymentError(message, context=result.stderr.strip() or command.render(), exit_code=exit_code)
        return result

    def _settle(self) -> None:
        if self.settle_seconds > 0:
            time.sleep(self.settle_seconds)

    def create_remote_dir(self) -> None:
        self.logger.info("Creating remote directory...")
        self._require(
            RemoteCommand.of("mkdir", "-p", self.config.remote_dir),
            "Failed to create remote directory",
            ExitCode.REMOTE_DIR_FAILED,
        )

    def transfer_files(self) -> None:
        self.logger.info("Transferring project files to remote server...")
        result = self.ssh.push_directory(self.config.work_dir, self.config.remote_dir, RSYNC_EXCLUDES)
        if result.is_failure:
            raise DeploymentError(
                "Failed to transfer files",
                context=result.stderr.strip() or None,
                exit_code=ExitCode.FILE_TRANSFER_FAILED,
            )
        self.logger.success("Files transferred successfully")

    def teardown_previous(self, compose: ComposeTool) -> None:
        """Best-effort: nothing to stop is not an error."""
        self.logger.info("Stopping existing containers (if any)...")
        self.ssh.execute(
            compose.command(self.config.compose_project, "down", "--remove-orphans", cwd=self.config.remote_dir)
        )

        existing = list_project_containers(self.ssh, self.config.project_name)
        if existing:
            result = self.ssh.execute(RemoteCommand.of("docker", "rm", "-f", *existing))
            if result.is_success:
                self.logger.info(f"Removed {len(existing)} previous container(s)")
            else:
                self.logger.log(f"Ignored failure removing containers: {result.stderr.strip()}", "DEBUG")

    def start_compose_stack(self, descriptor: BuildDescriptor, compose: ComposeTool) -> None:
        self.logger.info("Building and starting containers with Docker Compose...")
        message = "Failed to deploy with Docker Compose"
        code = ExitCode.COMPOSE_DEPLOY_FAILED
        project = self.config.compose_project
        remote_dir = self.config.remote_dir

        self._require(compose.command(project, "build", manifest=descriptor.manifest, cwd=remote_dir), message, code)
        self._require(compose.command(project, "up", "-d", manifest=descriptor.manifest, cwd=remote_dir), message, code)
        self._settle()
        status = self._require(compose.command(project, "ps", manifest=descriptor.manifest, cwd=remote_dir), message, code)
        self.logger.log_output(status.stdout.strip(), "compose ps")

    def start_single_container(self) -> None:
        name = self.config.project_name
        port = self.config.app_port

        self.logger.info("Building Docker image...")
        self._require(
            RemoteCommand.of("docker", "build", "-t", self.config.image_ref, ".", cwd=self.config.remote_dir),
            "Failed to build Docker image",
            ExitCode.IMAGE_BUILD_FAILED,
        )

        self.logger.info("Running Docker container...")
        self._require(
            RemoteCommand.of(
                "docker",
                "run",
                "-d",
                "--name",
                name,
                "--restart",
                "unless-stopped",
                "-p",
                f"{port}:{port}",
                self.config.image_ref,
            ),
            "Failed to run Docker container",
            ExitCode.CONTAINER_RUN_FAILED,
        )
        self._settle()
        status = self._require(
            RemoteCommand.of("docker", "ps", "-a", "--filter", container_name_filter(name)),
            "Failed to run Docker container",
            ExitCode.CONTAINER_RUN_FAILED,
        )
        self.logger.log_output(status.stdout.strip(), "docker ps")

    def show_logs(self, descriptor: BuildDescriptor, compose: ComposeTool) -> None:
        """Non-fatal: a failed log fetch is only reported."""
        self.logger.info("Checking container logs...")
        if descriptor.is_compose:
            result = self.ssh.execute(
                compose.command(
                    self.config.compose_project,
                    "logs",
                    f"--tail={LOG_TAIL_LINES}",
                    manifest=descriptor.manifest,
                    cwd=self.config.remote_dir,
                )
            )
        else:
            result = self.ssh.docker_logs(self.config.project_name, LOG_TAIL_LINES)

        if result.is_failure:
            self.logger.warning("Could not retrieve container logs")
            return
        self.logger.console.print(Text(result.output, style="dim"))
