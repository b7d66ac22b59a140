"""Reverses a deployment on the target host."""

from typing import Optional

from vpsdeploy.constants import COMPOSE_MANIFEST_NAMES
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.models.results import CleanupReport, ResultStatus, StepOutcome
from vpsdeploy.services.deployment_executor import list_project_containers
from vpsdeploy.services.provisioner import detect_compose_tool
from vpsdeploy.services.ssh_service import SSHService


class CleanupReverser:
    """
    Removes everything a deployment created on the host.

    Every step is best-effort: a failure is recorded in the report and the
    remaining steps still run.
    """

    def __init__(self, config: DeploymentConfig, ssh: SSHService, logger: DeployLogger):
        self.config = config
        self.ssh = ssh
        self.logger = logger

    def run(self) -> CleanupReport:
        self.logger.step("Cleanup Mode: Removing Deployed Resources")
        report = CleanupReport()

        self.stop_application(report)
        self.remove_image(report)
        self.remove_site(report)
        self.reload_proxy(report)
        self.remove_remote_dir(report)

        for outcome in report.failures:
            self.logger.warning(f"{outcome.name} failed: {outcome.detail or 'see log file'}")
        self.logger.success(f"Cleanup completed ({report.summary()})")
        return report

    def _attempt(self, report: CleanupReport, name: str, command: RemoteCommand) -> StepOutcome:
        result = self.ssh.execute(command)
        if result.is_success:
            return report.record(name, ResultStatus.SUCCESS)
        return report.record(name, ResultStatus.FAILURE, result.stderr.strip())

    def remote_manifest(self) -> Optional[str]:
        for name in COMPOSE_MANIFEST_NAMES:
            if self.ssh.succeeds(RemoteCommand.of("test", "-f", f"{self.config.remote_dir}/{name}")):
                return name
        return None

    def stop_application(self, report: CleanupReport) -> None:
        self.logger.info("Stopping and removing containers...")
        manifest = self.remote_manifest()
        compose = detect_compose_tool(self.ssh) if manifest else None

        if manifest and compose:
            self._attempt(
                report,
                "compose down",
                compose.command(
                    self.config.compose_project,
                    "down",
                    "-v",
                    "--remove-orphans",
                    manifest=manifest,
                    cwd=self.config.remote_dir,
                ),
            )
            return

        containers = list_project_containers(self.ssh, self.config.project_name)
        if not containers:
            report.record("stop container", ResultStatus.SKIPPED, "no container found")
            report.record("remove container", ResultStatus.SKIPPED, "no container found")
            return

        self._attempt(report, "stop container", RemoteCommand.of("docker", "stop", *containers))
        self._attempt(report, "remove container", RemoteCommand.of("docker", "rm", *containers))

    def remove_image(self, report: CleanupReport) -> None:
        self.logger.info("Removing Docker image...")
        image = self.config.image_ref
        if not self.ssh.succeeds(RemoteCommand.of("docker", "image", "inspect", image)):
            report.record("remove image", ResultStatus.SKIPPED, f"{image} not present")
            return
        self._attempt(report, "remove image", RemoteCommand.of("docker", "rmi", image))

    def remove_site(self, report: CleanupReport) -> None:
        self.logger.info("Removing Nginx configuration...")
        self._attempt(
            report,
            "remove site link",
            RemoteCommand.of("rm", "-f", self.config.nginx_enabled_path, sudo=True),
        )
        self._attempt(
            report,
            "remove site config",
            RemoteCommand.of("rm", "-f", self.config.nginx_site_path, sudo=True),
        )

    def reload_proxy(self, report: CleanupReport) -> None:
        """Reload only after a passing syntax check."""
        if not self.ssh.succeeds(RemoteCommand.of("command", "-v", "nginx")):
            report.record("reload nginx", ResultStatus.SKIPPED, "nginx not installed")
            return

        tested = self._attempt(report, "nginx -t", RemoteCommand.of("nginx", "-t", sudo=True))
        if not tested.succeeded:
            report.record("reload nginx", ResultStatus.SKIPPED, "configuration test failed")
            return
        self._attempt(report, "reload nginx", RemoteCommand.of("systemctl", "reload", "nginx", sudo=True))

    def remove_remote_dir(self, report: CleanupReport) -> None:
        self.logger.info("Removing project directory...")
        self._attempt(report, "remove project directory", RemoteCommand.of("rm", "-rf", self.config.remote_dir))
