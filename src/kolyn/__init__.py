"""kolyn: project context, skills and audits for AI coding agents."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("kolyn")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"
