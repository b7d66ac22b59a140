"""
vpsdeploy Services

One service per pipeline stage, plus the SSH transport they share.
"""

from .build_detector import detect_build_descriptor
from .cleanup import CleanupReverser
from .connectivity import ConnectivityProber
from .deployment_executor import DeploymentExecutor
from .deployment_validator import DeploymentValidator
from .parameter_collector import ParameterCollector
from .provisioner import EnvironmentProvisioner
from .proxy_configurator import ProxyConfigurator
from .repository_service import RepositorySynchronizer
from .ssh_service import SSHService

__all__ = [
    "CleanupReverser",
    "ConnectivityProber",
    "DeploymentExecutor",
    "DeploymentValidator",
    "EnvironmentProvisioner",
    "ParameterCollector",
    "ProxyConfigurator",
    "RepositorySynchronizer",
    "SSHService",
    "detect_build_descriptor",
]
