"""Build mode detection for the synchronized working copy."""

from pathlib import Path
from typing import Optional

import yaml

from vpsdeploy.constants import COMPOSE_MANIFEST_NAMES, DOCKERFILE_NAME
from vpsdeploy.exceptions import BuildDescriptorError
from vpsdeploy.logger import DeployLogger
from vpsdeploy.models.config import BuildDescriptor, BuildMode


def read_compose_services(manifest_path: Path) -> Optional[tuple[str, ...]]:
    """
    Read service names from a compose manifest.

    Returns:
        Service names, or None if the manifest cannot be parsed
    """
    try:
        payload = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        return None
    if not isinstance(payload, dict):
        return None
    services = payload.get("services")
    if not isinstance(services, dict):
        return ()
    return tuple(str(name) for name in services)


def detect_build_descriptor(work_dir: Path, logger: Optional[DeployLogger] = None) -> BuildDescriptor:
    """
    Determine whether the project builds from a Dockerfile or a compose manifest.

    A Dockerfile takes precedence; compose manifests are checked in
    COMPOSE_MANIFEST_NAMES order.

    Raises:
        BuildDescriptorError: Neither descriptor is present (exit code 30)
    """
    if logger:
        logger.step("Step 3: Verifying Docker Configuration Files")

    if (work_dir / DOCKERFILE_NAME).is_file():
        if logger:
            logger.success("Dockerfile found")
        return BuildDescriptor(mode=BuildMode.SINGLE_IMAGE, manifest=DOCKERFILE_NAME)

    for manifest in COMPOSE_MANIFEST_NAMES:
        manifest_path = work_dir / manifest
        if not manifest_path.is_file():
            continue

        services = read_compose_services(manifest_path)
        if logger:
            logger.success(f"{manifest} found")
            if services is None:
                logger.warning(f"Could not parse {manifest}; the compose tool will report any errors")
            elif services:
                logger.info(f"Compose services: {', '.join(services)}")
        return BuildDescriptor(mode=BuildMode.COMPOSE_STACK, manifest=manifest, services=services or ())

    raise BuildDescriptorError(str(work_dir))
