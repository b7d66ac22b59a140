"""
Deployment Configuration Models

Immutable value objects shared by every pipeline stage.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from vpsdeploy.constants import NGINX_SITES_AVAILABLE, NGINX_SITES_ENABLED


def derive_project_name(repo_url: str) -> str:
    """
    Derive the project name from a repository URL.

    Args:
        repo_url: Repository URL (https, ssh or local path)

    Returns:
        Basename of the URL with a trailing ".git" removed
    """
    basename = repo_url.strip().rstrip("/").rsplit("/", 1)[-1]
    basename = basename.rsplit(":", 1)[-1]
    if basename.endswith(".git"):
        basename = basename[: -len(".git")]
    return basename


def inject_credential(repo_url: str, token: str) -> str:
    """Embed an access token into an https repository URL."""
    if repo_url.startswith("https://") and token:
        return repo_url.replace("https://", f"https://{token}@", 1)
    return repo_url


@dataclass(frozen=True)
class DeploymentConfig:
    """Deployment parameters collected once at startup."""

    repo_url: str
    access_token: str = field(repr=False)
    branch: str
    ssh_user: str
    server_ip: str
    ssh_key_path: Path
    app_port: int
    workspace: Path
    cleanup: bool = False

    @property
    def project_name(self) -> str:
        """Container name, Nginx site name and remote directory name."""
        return derive_project_name(self.repo_url)

    @property
    def authenticated_url(self) -> str:
        """Repository URL with the access token injected."""
        return inject_credential(self.repo_url, self.access_token)

    @property
    def work_dir(self) -> Path:
        """Local working copy location."""
        return self.workspace / self.project_name

    @property
    def ssh_target(self) -> str:
        """Get SSH connection string (user@host)."""
        return f"{self.ssh_user}@{self.server_ip}"

    @property
    def remote_home(self) -> str:
        if self.ssh_user == "root":
            return "/root"
        return f"/home/{self.ssh_user}"

    @property
    def remote_dir(self) -> str:
        """Project directory on the remote host."""
        return f"{self.remote_home}/{self.project_name}"

    @property
    def image_ref(self) -> str:
        """Image reference; Docker repository names must be lowercase."""
        return f"{self.project_name.lower()}:latest"

    @property
    def compose_project(self) -> str:
        """Compose project name (lowercase alphanumerics, dash, underscore)."""
        normalized = re.sub(r"[^a-z0-9_-]", "", self.project_name.lower())
        return normalized.lstrip("-_") or "app"

    @property
    def nginx_site_path(self) -> str:
        return f"{NGINX_SITES_AVAILABLE}/{self.project_name}"

    @property
    def nginx_enabled_path(self) -> str:
        return f"{NGINX_SITES_ENABLED}/{self.project_name}"

    def __repr__(self) -> str:
        return (
            f"DeploymentConfig(project={self.project_name}, branch={self.branch}, "
            f"target={self.ssh_target}, port={self.app_port})"
        )


class BuildMode(Enum):
    """How the project is built and run on the remote host."""

    SINGLE_IMAGE = "single-image"
    COMPOSE_STACK = "compose-stack"


@dataclass(frozen=True)
class BuildDescriptor:
    """Build mode plus the manifest file that selected it."""

    mode: BuildMode
    manifest: str
    services: tuple[str, ...] = ()

    @property
    def is_compose(self) -> bool:
        return self.mode is BuildMode.COMPOSE_STACK
