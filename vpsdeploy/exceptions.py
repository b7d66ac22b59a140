"""
vpsdeploy Exception Hierarchy

Every fatal pipeline error carries the stable exit code of its failure point.
"""

from typing import Optional

from vpsdeploy.constants import ExitCode


class VPSDeployError(Exception):
    """Base exception for all vpsdeploy errors."""

    def __init__(
        self,
        message: str,
        context: Optional[str] = None,
        exit_code: int = ExitCode.UNEXPECTED,
    ):
        self.message = message
        self.context = context
        self.exit_code = int(exit_code)
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format error message with optional context."""
        if self.context:
            return f"{self.message}\nContext: {self.context}"
        return self.message


class ParameterError(VPSDeployError):
    """Raised when a deployment parameter is missing or malformed."""

    pass


class RepositoryError(VPSDeployError):
    """Raised when the local working copy cannot be synchronised."""

    pass


class BuildDescriptorError(VPSDeployError):
    """Raised when no Dockerfile or compose manifest is present."""

    def __init__(self, work_dir: str):
        self.work_dir = work_dir
        super().__init__(
            "No Dockerfile or docker-compose.yml found in repository",
            context=f"Searched: {work_dir}",
            exit_code=ExitCode.NO_BUILD_DESCRIPTOR,
        )


class ConnectivityError(VPSDeployError):
    """Raised when the remote host cannot be reached over SSH."""

    pass


class ProvisioningError(VPSDeployError):
    """Raised when remote environment provisioning fails."""

    pass


class DeploymentError(VPSDeployError):
    """Raised when deployment operations fail."""

    pass


class ProxyError(VPSDeployError):
    """Raised when the reverse proxy cannot be configured."""

    def __init__(self, message: str, context: Optional[str] = None):
        super().__init__(message, context=context, exit_code=ExitCode.PROXY_CONFIG_FAILED)


class ValidationError(VPSDeployError):
    """Raised when post-deployment validation fails."""

    pass
