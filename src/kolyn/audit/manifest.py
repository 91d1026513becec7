"""Project dependency manifest (package.json) reader."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"


class ProjectManifest(BaseModel):
    dependencies: set[str] = Field(default_factory=set)
    dev_dependencies: set[str] = Field(default_factory=set)

    def has(self, name: str) -> bool:
        return name in self.dependencies or name in self.dev_dependencies

    @property
    def all_names(self) -> set[str]:
        return self.dependencies | self.dev_dependencies


def load_manifest(root: Path) -> ProjectManifest | None:
    """Read <root>/package.json. None when missing or unparseable.

    Only key presence matters; versions are ignored.
    """
    path = root / MANIFEST_NAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable {path}: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: top level is not an object")
        return None
    return ProjectManifest(
        dependencies=_names(data.get("dependencies")),
        dev_dependencies=_names(data.get("devDependencies")),
    )


def _names(section: object) -> set[str]:
    if not isinstance(section, dict):
        return set()
    return {str(k) for k in section}
