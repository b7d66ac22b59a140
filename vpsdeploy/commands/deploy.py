"""
Deploy Command

Runs the full deployment pipeline against one remote host.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

from rich.console import Console
from rich.prompt import Prompt

from vpsdeploy.base import BaseCommand
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.services import (
    ConnectivityProber,
    DeploymentExecutor,
    DeploymentValidator,
    EnvironmentProvisioner,
    ParameterCollector,
    ProxyConfigurator,
    RepositorySynchronizer,
    detect_build_descriptor,
)
from vpsdeploy.ui_components import show_summary


@dataclass
class DeployOptions:
    """Options for deploy command."""

    log_dir: Path
    env_file: Optional[Path] = None
    verbose: bool = False


class DeployCommand(BaseCommand):
    """
    Deploy a Dockerized repository to a remote host.

    Stages run strictly in order; the first fatal error stops the run and
    becomes the process exit code.
    """

    def __init__(
        self,
        options: DeployOptions,
        console: Optional[Console] = None,
        environ: Optional[Mapping[str, str]] = None,
        prompt: Optional[Callable[..., str]] = None,
    ):
        super().__init__(options.log_dir, verbose=options.verbose, console=console)
        self.options = options
        self.environ = environ
        self.prompt = prompt

    def collect_config(self, cleanup: bool) -> DeploymentConfig:
        collector = ParameterCollector(
            self.logger,
            environ=self.environ,
            env_file=self.options.env_file,
            prompt=self.prompt or Prompt.ask,
        )
        return collector.collect(cleanup=cleanup)

    def execute(self) -> None:
        """Execute deploy command."""
        self.show_header(title="Deploy Application", subtitle="Docker + Nginx on a single host")
        logger = self.init_logger("deploy")

        config = self.collect_config(cleanup=False)

        RepositorySynchronizer(config, logger).ensure_present()
        descriptor = detect_build_descriptor(config.work_dir, logger)

        ssh = self.ssh_service(config)
        ConnectivityProber(config, ssh, logger).check()

        environment = EnvironmentProvisioner(config, ssh, logger).provision()
        DeploymentExecutor(config, ssh, logger).deploy(descriptor, environment)
        ProxyConfigurator(config, ssh, logger).configure()
        validation = DeploymentValidator(config, ssh, logger).validate(descriptor)

        logger.step("Deployment Complete")
        logger.success("Deployment completed successfully!")
        show_summary(
            "Deployment Summary",
            {
                "Project": config.project_name,
                "Mode": descriptor.mode.value,
                "Application URL": f"http://{config.server_ip}",
                "Direct Port": f"http://{config.server_ip}:{config.app_port}",
                "Warnings": len(validation.warnings),
                "Log File": logger.log_path,
            },
            console=self.console,
        )
