"""Global and per-project configuration, config file loading, and env overrides."""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from dataclasses import asdict, dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_NAME = "config.json"
PROJECT_CONFIG_NAME = ".kolyn.json"
SUPPORTED_LANGUAGES = ("en", "es")
DEFAULT_LANGUAGE = "en"


class ConfigError(Exception):
    """Raised when a config file cannot be written."""


def get_kolyn_home() -> Path:
    env = os.environ.get("KOLYN_HOME")
    if env:
        return Path(env)
    return Path.home() / ".kolyn"


def get_skills_dir() -> Path:
    return get_kolyn_home() / "skills"


def get_sources_dir() -> Path:
    return get_kolyn_home() / "sources"


def get_services_dir() -> Path:
    return get_kolyn_home() / "services"


@dataclass
class GlobalConfig:
    language: str = DEFAULT_LANGUAGE
    skills_sources: list[str] = field(default_factory=list)

    @property
    def path(self) -> Path:
        return get_kolyn_home() / GLOBAL_CONFIG_NAME


@dataclass
class ProjectConfig:
    project_name: str = ""
    skills_sources: list[str] = field(default_factory=list)


def load_global_config(path: Path | None = None) -> GlobalConfig:
    """Load ~/.kolyn/config.json, falling back to defaults on missing or bad JSON."""
    config = GlobalConfig()
    path = path or config.path
    if path.exists():
        try:
            data = json.loads(path.read_text())
            if isinstance(data, dict):
                _apply_global(config, data)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to load global config from {path}: {e}")
    if env_lang := os.environ.get("KOLYN_LANG"):
        if env_lang.lower() in SUPPORTED_LANGUAGES:
            config.language = env_lang.lower()
    return config


def _apply_global(config: GlobalConfig, data: dict[str, object]) -> None:
    language = data.get("language")
    if isinstance(language, str) and language in SUPPORTED_LANGUAGES:
        config.language = language
    sources = data.get("skills_sources")
    if isinstance(sources, list):
        config.skills_sources = [s for s in sources if isinstance(s, str) and s]


def save_global_config(config: GlobalConfig, path: Path | None = None) -> Path:
    path = path or config.path
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        atomic_write(path, json.dumps(asdict(config), indent=2) + "\n")
    except OSError as e:
        raise ConfigError(f"could not write {path}: {e}") from e
    return path


def load_project_config(root: Path) -> ProjectConfig | None:
    """Load <root>/.kolyn.json. Returns None when the file does not exist.

    A file that exists but cannot be parsed is a hard error: sync must not
    silently fall back to the global sources when the user wrote a local file.
    """
    path = root / PROJECT_CONFIG_NAME
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"could not parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    config = ProjectConfig(project_name=root.name)
    name = data.get("project_name")
    if isinstance(name, str) and name:
        config.project_name = name
    sources = data.get("skills_sources")
    if isinstance(sources, list):
        config.skills_sources = [s for s in sources if isinstance(s, str) and s]
    return config


def save_project_config(root: Path, config: ProjectConfig) -> Path:
    path = root / PROJECT_CONFIG_NAME
    try:
        atomic_write(path, json.dumps(asdict(config), indent=2) + "\n")
    except OSError as e:
        raise ConfigError(f"could not write {path}: {e}") from e
    return path


def _file_mode(path: Path) -> int:
    """Existing file's permissions, or the umask default for a new file."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write(path: Path, content: str) -> None:
    """Write content to path atomically using tempfile + os.replace.

    mkstemp creates the temp file 0600; the final file keeps the target's mode.
    """
    mode = _file_mode(path)
    fd, tmp = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        os.write(fd, content.encode())
        os.close(fd)
        os.chmod(tmp, mode)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.close(fd)
        except OSError:
            pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
