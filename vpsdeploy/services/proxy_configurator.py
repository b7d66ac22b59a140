"""Nginx reverse-proxy site management."""

from pathlib import Path
from typing import Optional

from jinja2 import Template

from vpsdeploy.constants import NGINX_TEMPLATE_NAME, PROXY_PORT
from vpsdeploy.exceptions import ProxyError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.command import RemoteCommand
from vpsdeploy.models.config import DeploymentConfig
from vpsdeploy.services.ssh_service import SSHService

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def render_site_config(config: DeploymentConfig) -> str:
    """Render the Nginx server block for a deployment."""
    template_content = (TEMPLATES_DIR / NGINX_TEMPLATE_NAME).read_text(encoding="utf-8")
    return Template(template_content, keep_trailing_newline=True).render(
        project_name=config.project_name,
        listen_port=PROXY_PORT,
        server_name=config.server_ip,
        app_port=config.app_port,
    )


class ProxyConfigurator:
    """
    Writes and activates the project's Nginx site.

    The configuration is syntax-checked after activation and Nginx is only
    reloaded when the check passes. A site that fails the check is rolled
    back to whatever was installed before, so no later reload can pick it up.
    """

    def __init__(self, config: DeploymentConfig, ssh: SSHService, logger: DeployLogger):
        self.config = config
        self.ssh = ssh
        self.logger = logger

    def installed_link(self) -> Optional[str]:
        link = self.ssh.execute(RemoteCommand.of("readlink", self.config.nginx_enabled_path))
        return link.stdout.strip() if link.is_success else None

    def restore(self, previous_site: Optional[str], previous_link: Optional[str]) -> None:
        """Put the site file and symlink back the way they were before configure."""
        site_path = self.config.nginx_site_path
        enabled_path = self.config.nginx_enabled_path
        if previous_site is None:
            restored = self.ssh.execute(RemoteCommand.of("rm", "-f", site_path, sudo=True))
        else:
            restored = self.ssh.write_file(site_path, previous_site)
        if previous_link is None:
            unlinked = self.ssh.execute(RemoteCommand.of("rm", "-f", enabled_path, sudo=True))
        else:
            unlinked = self.ssh.execute(RemoteCommand.of("ln", "-sfn", previous_link, enabled_path, sudo=True))
        if restored.is_failure or unlinked.is_failure:
            self.logger.warning(f"Could not restore the previous Nginx site for {self.config.project_name}")
        else:
            self.logger.info("Restored the previous Nginx site")

    def configure(self) -> bool:
        """
        Reconcile the Nginx site.

        Returns:
            True if Nginx was reloaded, False if it was already up to date

        Raises:
            ProxyError: Any write, activation, syntax or reload failure (exit code 70)
        """
        self.logger.step("Step 7: Configuring Nginx Reverse Proxy")
        desired = render_site_config(self.config)

        previous_site = self.ssh.read_file(self.config.nginx_site_path)
        previous_link = self.installed_link()
        if previous_site == desired and previous_link == self.config.nginx_site_path:
            self.logger.success("Nginx configuration is already up to date")
            return False

        self.logger.info("Creating Nginx configuration...")
        written = self.ssh.write_file(self.config.nginx_site_path, desired)
        if written.is_failure:
            raise ProxyError("Failed to configure Nginx", context=written.stderr.strip() or "write failed")

        # ln -sfn swaps the symlink in a single step
        linked = self.ssh.execute(
            RemoteCommand.of("ln", "-sfn", self.config.nginx_site_path, self.config.nginx_enabled_path, sudo=True)
        )
        if linked.is_failure:
            raise ProxyError("Failed to enable Nginx site", context=linked.stderr.strip() or None)

        self.logger.info("Testing Nginx configuration...")
        tested = self.ssh.execute(RemoteCommand.of("nginx", "-t", sudo=True))
        if tested.is_failure:
            self.restore(previous_site, previous_link)
            raise ProxyError(
                "Nginx configuration test failed; the previous configuration is still serving traffic",
                context=tested.stderr.strip() or None,
            )

        self.logger.info("Reloading Nginx...")
        reloaded = self.ssh.execute(RemoteCommand.of("systemctl", "reload", "nginx", sudo=True))
        if reloaded.is_failure:
            raise ProxyError("Failed to reload Nginx", context=reloaded.stderr.strip() or None)

        self.logger.success("Nginx configured successfully")
        return True
