"""Clone or update skill source repositories under ~/.kolyn/sources.

All git calls go through an ``ExternalTool``, which is the single mock target
in tests.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from kolyn.config import (
    ConfigError,
    ProjectConfig,
    get_sources_dir,
    load_global_config,
    load_project_config,
    save_project_config,
)
from kolyn.external import ExternalTool, SubprocessTool, ToolError
from kolyn.i18n import Locale

logger = logging.getLogger(__name__)

ACCESS_ERROR_MARKERS = (
    "Permission denied",
    "Authentication failed",
    "could not read Username",
    "Repository not found",
    "publickey",
    "Could not read from remote repository",
)

_YES = ("y", "yes", "s", "si")


class SyncError(Exception):
    """Raised when git clone/pull fails for a skill source."""

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class RepoAccessError(SyncError):
    """git failed because the repository is private or credentials are wrong."""


@dataclass(frozen=True)
class SyncOutcome:
    url: str
    path: Path
    action: str  # "clone" or "pull"


def sanitize_repo_name(url: str) -> str:
    """Turn a repository URL into a flat directory name.

    ``https://github.com/org/repo.git`` -> ``github.com-org-repo``
    ``git@github.com:org/repo.git`` -> ``github.com-org-repo``
    """
    name = url.strip()
    for prefix in ("https://", "http://", "git@"):
        name = name.removeprefix(prefix)
    name = name.removesuffix(".git")
    return name.replace(":", "/").replace("/", "-")


def is_access_error(output: str) -> bool:
    return any(marker in output for marker in ACCESS_ERROR_MARKERS)


def sync_source(url: str, base_dir: Path, tool: ExternalTool) -> SyncOutcome:
    """Clone url into base_dir, or pull when it is already there."""
    target = base_dir / sanitize_repo_name(url)
    if target.exists():
        action = "pull"
        args = ["git", "pull"]
        cwd: Path | None = target
    else:
        action = "clone"
        args = ["git", "clone", url, str(target)]
        cwd = None

    logger.debug(f"git {action} {url} -> {target}")
    try:
        result = tool.run(args, cwd=cwd)
    except ToolError as e:
        raise SyncError(str(e)) from e

    if not result.ok:
        output = result.output
        message = f"git {action} failed: {output}" if output else f"git {action} failed"
        if is_access_error(output):
            raise RepoAccessError(message, output)
        raise SyncError(message, output)
    return SyncOutcome(url=url, path=target, action=action)


def _ask(prompt: str) -> str:
    try:
        return input(prompt).strip()
    except EOFError:
        return ""


def prompt_project_config(root: Path) -> ProjectConfig | None:
    """Interactively create <root>/.kolyn.json. None when the user declines."""
    answer = _ask("No .kolyn.json found. Create one now? [y/N]: ")
    if answer.lower() not in _YES:
        print("Cancelled. Create .kolyn.json manually to continue.")
        return None

    name = _ask(f"Project name [{root.name}]: ") or root.name
    print("Enter skills repository URLs, one per line. Leave empty to finish.")
    sources: list[str] = []
    while url := _ask("Repo URL: "):
        sources.append(url)
    if not sources:
        print(
            "Warning: no repositories entered; the file is created without sources.",
            file=sys.stderr,
        )

    config = ProjectConfig(project_name=name, skills_sources=sources)
    path = save_project_config(root, config)
    print(f"Created {path}")
    return config


def resolve_sources(root: Path, locale: Locale, *, interactive: bool) -> list[str] | None:
    """Project .kolyn.json wins over the global config. None means nothing to do."""
    project = load_project_config(root)
    if project is not None:
        print(locale.text("using_local"))
        return project.skills_sources

    global_config = load_global_config()
    if global_config.skills_sources:
        print(locale.text("using_global"))
        return global_config.skills_sources

    if interactive:
        created = prompt_project_config(root)
        return created.skills_sources if created is not None else None

    print(f"Warning: {locale.text('no_config')}", file=sys.stderr)
    return None


def sync_all(
    sources: list[str], base_dir: Path, tool: ExternalTool, locale: Locale
) -> list[str]:
    """Sync every source; a failing source does not stop the others.

    Returns the URLs that failed.
    """
    failed: list[str] = []
    for url in sources:
        target = base_dir / sanitize_repo_name(url)
        if target.exists():
            print(locale.text("updating_skills", target=target))
        else:
            print(locale.text("installing_skills", target=url))
        try:
            sync_source(url, base_dir, tool)
        except SyncError as e:
            print(f"Error: {locale.text('sync_failed', url=url, error=e)}", file=sys.stderr)
            if isinstance(e, RepoAccessError):
                print(f"  {locale.text('repo_access_error')}", file=sys.stderr)
            failed.append(url)
    return failed


def cmd_sync(
    args: argparse.Namespace,
    locale: Locale | None = None,
    tool: ExternalTool | None = None,
) -> None:
    locale = locale or Locale()
    tool = tool or SubprocessTool()
    root = Path(getattr(args, "root", None) or Path.cwd()).resolve()

    try:
        sources = resolve_sources(root, locale, interactive=sys.stdin.isatty())
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    if sources is None:
        return
    if not sources:
        print(f"Warning: {locale.text('no_config')}", file=sys.stderr)
        return

    base_dir = get_sources_dir()
    try:
        base_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"Error: could not create {base_dir}: {e}", file=sys.stderr)
        sys.exit(1)

    failed = sync_all(sources, base_dir, tool, locale)
    if failed:
        sys.exit(1)
    print(locale.text("sync_success"))
