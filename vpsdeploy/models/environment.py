"""
Remote Environment Models

Facts about the target host discovered during provisioning.
"""

from dataclasses import dataclass
from typing import Optional

from vpsdeploy.models.command import RemoteCommand


@dataclass(frozen=True)
class ComposeTool:
    """The compose invocation available on the host."""

    argv: tuple[str, ...]

    @property
    def is_plugin(self) -> bool:
        return self.argv == ("docker", "compose")

    def command(
        self,
        project: str,
        *args: str,
        manifest: Optional[str] = None,
        cwd: Optional[str] = None,
    ) -> RemoteCommand:
        """Build a compose command scoped to one project."""
        argv = [*self.argv, "-p", project]
        if manifest:
            argv.extend(["-f", manifest])
        argv.extend(args)
        return RemoteCommand.of(*argv, cwd=cwd)


COMPOSE_PLUGIN = ComposeTool(argv=("docker", "compose"))
COMPOSE_STANDALONE = ComposeTool(argv=("docker-compose",))


@dataclass(frozen=True)
class RemoteEnvironment:
    """Provisioned tooling on the target host."""

    compose: ComposeTool
    docker_version: str = ""
    compose_version: str = ""
    nginx_version: str = ""
