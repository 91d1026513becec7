"""CLI command handler for ``kolyn services``: status, up, down."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from kolyn.config import get_services_dir
from kolyn.external import ExternalTool, SubprocessTool
from kolyn.services.docker import (
    ServiceError,
    ServiceInfo,
    ServiceStatus,
    find_service,
    list_services,
    service_status,
    start_service,
    stop_service,
)

_STATUS_MARKERS = {
    ServiceStatus.RUNNING: "●",
    ServiceStatus.STOPPED: "○",
    ServiceStatus.UNKNOWN: "?",
}


def _print_status(services: list[ServiceInfo], tool: ExternalTool) -> None:
    services_dir = get_services_dir()
    if not services:
        print(f"No services configured in {services_dir}")
        return
    print(f"  {'SERVICE':<35} STATUS")
    running = 0
    for service in services:
        status = service_status(Path(service.path), tool)
        if status == ServiceStatus.RUNNING:
            running += 1
        print(f"  {service.name:<35} {_STATUS_MARKERS[status]} {status}")
    print(f"\n  Total: {len(services)} service(s), {running} running")


def _lookup(services: list[ServiceInfo], ref: str) -> ServiceInfo:
    service = find_service(services, ref)
    if service is None:
        print(f"Error: service not found: {ref}", file=sys.stderr)
        sys.exit(1)
    return service


def cmd_services(args: argparse.Namespace, tool: ExternalTool | None = None) -> None:
    action: str = getattr(args, "services_action", None) or "status"
    tool = tool or SubprocessTool()
    services = list_services(get_services_dir())

    try:
        if action == "status":
            _print_status(services, tool)
        elif action == "up":
            service = _lookup(services, args.name)
            print(f"Starting {service.name}...")
            start_service(Path(service.path), tool)
            print(f"Service '{service.name}' started")
            print(f"  Logs: cd {service.path} && docker compose logs -f")
        elif action == "down":
            service = _lookup(services, args.name)
            print(f"Stopping {service.name}...")
            stop_service(Path(service.path), tool, volumes=getattr(args, "volumes", False))
            print(f"Service '{service.name}' stopped")
        else:
            print(f"Error: unknown action: {action}", file=sys.stderr)
            sys.exit(1)
    except ServiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
