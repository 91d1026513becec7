"""Docker Compose services kept under ~/.kolyn/services/<name>/docker-compose.yml."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel

from kolyn.external import ExternalTool, ToolError

logger = logging.getLogger(__name__)

COMPOSE_FILE = "docker-compose.yml"


class ServiceError(Exception):
    """Raised when docker compose up/down fails or the service is unknown."""


class ServiceStatus(StrEnum):
    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"


class ServiceInfo(BaseModel):
    name: str  # display name
    dir_name: str
    path: str

    def matches(self, ref: str) -> bool:
        ref = ref.strip().lower()
        return ref in (self.dir_name.lower(), self.name.lower())


def display_name(dir_name: str) -> str:
    name = dir_name.replace("-", " ")
    return name[:1].upper() + name[1:]


def list_services(services_dir: Path) -> list[ServiceInfo]:
    """Every subdirectory holding a compose file. Missing dir -> empty list."""
    if not services_dir.is_dir():
        return []
    services: list[ServiceInfo] = []
    for entry in sorted(services_dir.iterdir()):
        if entry.is_dir() and (entry / COMPOSE_FILE).is_file():
            services.append(
                ServiceInfo(name=display_name(entry.name), dir_name=entry.name, path=str(entry))
            )
    return services


def find_service(services: list[ServiceInfo], ref: str) -> ServiceInfo | None:
    return next((s for s in services if s.matches(ref)), None)


def service_status(path: Path, tool: ExternalTool) -> ServiceStatus:
    try:
        ps = tool.run(["docker", "compose", "ps", "-q"], cwd=path)
        if not ps.ok:
            return ServiceStatus.UNKNOWN
        ids = ps.stdout.split()
        if not ids:
            return ServiceStatus.STOPPED
        inspect = tool.run(
            ["docker", "inspect", "-f", "{{.State.Running}}", ids[0]], cwd=path
        )
    except ToolError as e:
        logger.debug(f"docker status failed for {path}: {e}")
        return ServiceStatus.UNKNOWN
    if not inspect.ok:
        return ServiceStatus.UNKNOWN
    state = inspect.stdout.strip()
    if state == "true":
        return ServiceStatus.RUNNING
    if state == "false":
        return ServiceStatus.STOPPED
    return ServiceStatus.UNKNOWN


def _compose(path: Path, args: list[str], tool: ExternalTool) -> None:
    if not (path / COMPOSE_FILE).is_file():
        raise ServiceError(f"{COMPOSE_FILE} not found in {path}")
    try:
        result = tool.run(["docker", "compose", *args], cwd=path, interactive=True)
    except ToolError as e:
        raise ServiceError(str(e)) from e
    if not result.ok:
        raise ServiceError(
            f"docker compose {' '.join(args)} exited with status {result.returncode}"
        )


def start_service(path: Path, tool: ExternalTool) -> None:
    _compose(path, ["up", "-d"], tool)


def stop_service(path: Path, tool: ExternalTool, *, volumes: bool = False) -> None:
    args = ["down", "-v"] if volumes else ["down"]
    _compose(path, args, tool)
