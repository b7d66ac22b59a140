"""
Cleanup Command

Removes a previous deployment from the remote host.
"""

from dataclasses import dataclass

from vpsdeploy.commands.deploy import DeployCommand, DeployOptions
from vpsdeploy.services import CleanupReverser
from vpsdeploy.ui_components import WARNING_COLOR, show_summary


@dataclass
class CleanupOptions(DeployOptions):
    """Options for cleanup command."""

    pass


class CleanupCommand(DeployCommand):
    """
    Reverse a deployment.

    Parameters are still collected, since the target must be known. Removal
    steps never fail the command; their outcomes are summarised instead.
    """

    def execute(self) -> None:
        """Execute cleanup command."""
        self.show_header(title="Cleanup Deployment", details={"Mode": "cleanup"})
        logger = self.init_logger("cleanup")

        config = self.collect_config(cleanup=True)
        ssh = self.ssh_service(config)
        report = CleanupReverser(config, ssh, logger).run()

        show_summary(
            "Cleanup Summary",
            {
                "Project": config.project_name,
                "Host": config.ssh_target,
                "Steps": report.summary(),
                "Log File": logger.log_path,
            },
            console=self.console,
            color=WARNING_COLOR if report.failures else "green",
        )
