"""Post-deployment validation service."""

import requests

from vpsdeploy.constants import HTTP_PROBE_TIMEOUT, PROXY_PORT, ExitCode
from vpsdeploy.exceptions import ValidationError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.config import BuildDescriptor, DeploymentConfig
from vpsdeploy.models.results import ValidationResult
from vpsdeploy.services.deployment_executor import list_project_containers
from vpsdeploy.services.ssh_service import SSHService


def compose_project_filter(project: str) -> str:
    return f"label=com.docker.compose.project={project}"


class DeploymentValidator:
    """Checks service, container and proxy health, then probes reachability."""

    def __init__(self, config: DeploymentConfig, ssh: SSHService, logger: DeployLogger):
        self.config = config
        self.ssh = ssh
        self.logger = logger

    def validate(self, descriptor: BuildDescriptor) -> ValidationResult:
        """
        Validate the deployment.

        Returns:
            ValidationResult carrying the non-fatal probe warnings

        Raises:
            ValidationError: Docker inactive (80), no running container (81),
                Nginx inactive (82)
        """
        self.logger.step("Step 8: Validating Deployment")
        result = ValidationResult()

        self.check_service("docker", ExitCode.DOCKER_NOT_ACTIVE)
        self.check_containers(descriptor)
        self.check_service("nginx", ExitCode.NGINX_NOT_ACTIVE)

        for warning in self.probe_endpoints():
            result.add_warning(warning)

        self.logger.success("Deployment validation completed")
        return result

    def check_service(self, service: str, exit_code: ExitCode) -> None:
        self.logger.info(f"Checking {service} service status...")
        if not self.ssh.succeeds(RemoteCommand.of("systemctl", "is-active", "--quiet", service)):
            raise ValidationError(f"{service} service is not running", exit_code=exit_code)
        self.logger.success(f"{service} service is running")

    def running_containers(self, descriptor: BuildDescriptor) -> list[str]:
        if not descriptor.is_compose:
            return list_project_containers(self.ssh, self.config.project_name, running_only=True)

        query = self.ssh.execute(
            RemoteCommand.of(
                "docker",
                "ps",
                "-q",
                "--filter",
                compose_project_filter(self.config.compose_project),
                "--filter",
                "status=running",
            )
        )
        if query.is_failure:
            return []
        return [line.strip() for line in query.stdout.splitlines() if line.strip()]

    def check_containers(self, descriptor: BuildDescriptor) -> None:
        self.logger.info("Checking container status...")
        running = self.running_containers(descriptor)
        if not running:
            if descriptor.is_compose:
                message = "No containers are running"
            else:
                message = f"Container {self.config.project_name} is not running"
            raise ValidationError(message, exit_code=ExitCode.CONTAINER_NOT_RUNNING)
        self.logger.success(f"{len(running)} container(s) running")

    def probe_in_host(self, url: str) -> str:
        """Probe a URL with curl on the remote host; returns a warning or ''."""
        result = self.ssh.execute(
            RemoteCommand.of("curl", "-f", "-s", "-o", "/dev/null", "-w", "%{http_code}", url)
        )
        if result.is_failure:
            return f"In-host probe of {url} failed"
        self.logger.success(f"{url} responded with HTTP {result.stdout.strip()}")
        return ""

    def probe_from_controller(self, url: str) -> str:
        """Probe a URL from this machine; returns a warning or ''."""
        try:
            response = requests.get(url, timeout=HTTP_PROBE_TIMEOUT)
        except requests.RequestException as exc:
            return f"Could not reach {url}: {exc.__class__.__name__}"
        if response.status_code >= 400:
            return f"{url} responded with HTTP {response.status_code}"
        self.logger.success(f"Application is accessible at {url}")
        return ""

    def probe_endpoints(self) -> list[str]:
        """Firewalls may legitimately block these, so failures are warnings."""
        port = self.config.app_port
        ip = self.config.server_ip

        self.logger.info("Testing application endpoint locally on server...")
        warnings = [
            self.probe_in_host(f"http://localhost:{port}"),
            self.probe_in_host("http://localhost"),
        ]

        self.logger.info("Testing application endpoint remotely...")
        warnings.append(self.probe_from_controller(f"http://{ip}/"))
        if port != PROXY_PORT:
            warnings.append(self.probe_from_controller(f"http://{ip}:{port}/"))

        warnings = [warning for warning in warnings if warning]
        for warning in warnings:
            self.logger.warning(warning)
        if any("Could not reach" in warning for warning in warnings):
            self.logger.warning("Could not reach application remotely. Check firewall settings.")
        return warnings
