"""CLI entry point for kolyn."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import cast

from kolyn import __version__
from kolyn.config import (
    SUPPORTED_LANGUAGES,
    ConfigError,
    GlobalConfig,
    load_global_config,
    save_global_config,
)
from kolyn.i18n import Locale


def _cmd_version(_args: argparse.Namespace, _locale: Locale) -> None:
    print(f"kolyn {__version__}")


def _cmd_init(args: argparse.Namespace, _locale: Locale) -> None:
    from kolyn.bootstrap.commands import cmd_init

    cmd_init(args)


def _cmd_check(args: argparse.Namespace, locale: Locale) -> None:
    from kolyn.audit.commands import cmd_check

    cmd_check(args, locale)


def _cmd_sync(args: argparse.Namespace, locale: Locale) -> None:
    from kolyn.services.sync import cmd_sync

    cmd_sync(args, locale)


def _cmd_scaffold(args: argparse.Namespace, _locale: Locale) -> None:
    from kolyn.bootstrap.scaffold import cmd_scaffold

    cmd_scaffold(args)


def _cmd_skills(args: argparse.Namespace, _locale: Locale) -> None:
    from kolyn.skills.commands import cmd_skills

    cmd_skills(args)


def _cmd_services(args: argparse.Namespace, _locale: Locale) -> None:
    from kolyn.services.commands import cmd_services

    cmd_services(args)


def _prompt(label: str, default: str) -> str:
    try:
        answer = input(f"{label} [{default}]: ").strip()
    except EOFError:
        return default
    return answer or default


def _cmd_config(args: argparse.Namespace, locale: Locale) -> None:
    action = cast(str | None, args.config_action) or "show"
    config = load_global_config()

    if action == "show":
        print(f"Config file: {config.path}")
        print(json.dumps(asdict(config), indent=2))
        return

    language = cast(str | None, args.language)
    sources = cast(list[str] | None, args.sources)
    if sys.stdin.isatty():
        if language is None:
            language = _prompt("Language (en/es)", config.language).lower()
        if sources is None:
            print("Enter skills repository URLs, one per line. Leave empty to finish.")
            sources = []
            while url := _prompt("Repo URL", "").strip():
                sources.append(url)

    if language is not None and language not in SUPPORTED_LANGUAGES:
        print(f"Error: unsupported language: {language}", file=sys.stderr)
        sys.exit(1)

    new_config = GlobalConfig(
        language=language or config.language,
        skills_sources=sources if sources is not None else config.skills_sources,
    )
    try:
        path = save_global_config(new_config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    print(Locale.from_config(new_config).text("global_created", path=path))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kolyn",
        description="Skills-driven project context and audit tool for AI coding agents",
    )
    _ = parser.add_argument(
        "-V", "--version", action="version", version=f"kolyn {__version__}"
    )
    _ = parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging on stderr"
    )
    subparsers = parser.add_subparsers(dest="command")

    # init subcommand
    init_p = subparsers.add_parser("init", help="Vendor skills and generate Agent.md")
    _ = init_p.add_argument(
        "--skill",
        action="append",
        dest="skills",
        metavar="REF",
        help="Skill to install (name, category/name, or path); repeatable",
    )
    _ = init_p.add_argument(
        "--auto",
        action="store_true",
        help="Also install every skill whose applies_to matches the project type",
    )
    _ = init_p.add_argument(
        "--capability",
        action="append",
        dest="capabilities",
        metavar="C",
        help="Restrict --auto to skills with this capability; repeatable",
    )
    _ = init_p.add_argument(
        "--type",
        dest="project_type",
        default=None,
        help="Override the detected project type",
    )

    # check subcommand
    _ = subparsers.add_parser("check", help="Audit the project against its declared skills")

    # sync subcommand
    _ = subparsers.add_parser("sync", help="Clone or update skill source repositories")

    # scaffold subcommand
    scaffold_p = subparsers.add_parser(
        "scaffold", help="Create a project from a scaffold skill, or audit its structure"
    )
    _ = scaffold_p.add_argument("skill", help="Scaffold skill (name or path)")
    _ = scaffold_p.add_argument("--name", default=None, help="Name of the project to create")
    _ = scaffold_p.add_argument(
        "--audit", action="store_true", help="Check the current directory's structure"
    )
    _ = scaffold_p.add_argument(
        "--fix", action="store_true", help="With --audit, create missing entries"
    )

    # config subcommand
    config_p = subparsers.add_parser("config", help="Global configuration")
    config_sub = config_p.add_subparsers(dest="config_action")
    ci = config_sub.add_parser("init", help="Create or update ~/.kolyn/config.json")
    _ = ci.add_argument("--language", choices=list(SUPPORTED_LANGUAGES), default=None)
    _ = ci.add_argument(
        "--source", action="append", dest="sources", metavar="URL", default=None
    )
    _ = config_sub.add_parser("show", help="Print the effective global configuration")

    # skills subcommand
    skills_p = subparsers.add_parser("skills", help="Browse the skills library")
    _ = skills_p.add_argument(
        "--dir",
        action="append",
        dest="dirs",
        type=Path,
        default=None,
        help="Scan this directory instead of the default roots; repeatable",
    )
    skills_sub = skills_p.add_subparsers(dest="skills_action")
    _ = skills_sub.add_parser("json", help="Print the catalog as JSON (default)")
    _ = skills_sub.add_parser("paths", help="Print one skill path per line")
    _ = skills_sub.add_parser("list", help="Print a numbered listing")
    sh = skills_sub.add_parser("show", help="Print a skill file")
    _ = sh.add_argument("ref", help="Skill name, category/name, or path")
    ed = skills_sub.add_parser("edit", help="Open a skill in $EDITOR")
    _ = ed.add_argument("ref", help="Skill name, category/name, or path")
    nw = skills_sub.add_parser("new", help="Create a skill from the template")
    _ = nw.add_argument("name", help="Skill file name (without .md)")
    _ = nw.add_argument("--force", action="store_true", help="Overwrite an existing file")

    # services subcommand
    services_p = subparsers.add_parser("services", help="Docker Compose services")
    services_sub = services_p.add_subparsers(dest="services_action")
    _ = services_sub.add_parser("status", help="Show service status (default)")
    up = services_sub.add_parser("up", help="Start a service")
    _ = up.add_argument("name", help="Service directory or display name")
    down = services_sub.add_parser("down", help="Stop a service")
    _ = down.add_argument("name", help="Service directory or display name")
    _ = down.add_argument("--volumes", action="store_true", help="Also remove volumes")

    # version subcommand
    _ = subparsers.add_parser("version", help="Print the kolyn version")

    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:])

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    locale = Locale.from_config(load_global_config())

    dispatch = {
        "init": _cmd_init,
        "check": _cmd_check,
        "sync": _cmd_sync,
        "scaffold": _cmd_scaffold,
        "config": _cmd_config,
        "skills": _cmd_skills,
        "services": _cmd_services,
        "version": _cmd_version,
    }
    command = cast(str | None, args.command)
    handler = dispatch.get(command) if command is not None else None
    if handler:
        handler(args, locale)
    else:
        parser.print_help()
        sys.exit(1)
