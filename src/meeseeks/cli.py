"""Command line interface for creating projects from blueprints."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from .blueprints import BLUEPRINTS, BlueprintVariant, get_variant
from .config import ProjectConfig
from .errors import MeeseeksError, VcsError
from .scaffold import ProjectScaffolder

PROMPT = "Project name (lowercase, e.g. myapp): "

Prompt = Callable[[str], str]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="meeseeks", description="Create projects from blueprints")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for variant in BLUEPRINTS.values():
        init_parser = subparsers.add_parser(variant.name, help=variant.description)
        init_parser.add_argument(
            "name",
            nargs="?",
            help="Project name; prompted for when omitted",
        )
        init_parser.add_argument(
            "-d",
            "--directory",
            type=Path,
            default=None,
            help="Directory in which the project directory is created (default: cwd)",
        )
        init_parser.add_argument(
            "--templates",
            type=Path,
            default=None,
            help="Directory holding blueprint templates, one sub-directory per variant",
        )
        init_parser.add_argument(
            "-v",
            "--verbose",
            action="store_true",
            help="Log every copy, rename and tool invocation",
        )

    subparsers.add_parser("list", help="list available blueprints")
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _read_name(args: argparse.Namespace, prompt: Prompt) -> str:
    if args.name is not None:
        return args.name
    try:
        answer = prompt(PROMPT)
    except EOFError:
        answer = ""
    return answer.strip()


def _handle_init(
    args: argparse.Namespace,
    variant: BlueprintVariant,
    *,
    prompt: Prompt,
    scaffolder: ProjectScaffolder,
) -> int:
    config = ProjectConfig.from_name(_read_name(args, prompt))
    parent = args.directory if args.directory is not None else Path.cwd()

    print(f"Creating {config.name}...")
    try:
        result = scaffolder.create(config, variant, parent, template_root=args.templates)
    except VcsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(
            f"Warning: project files were created at {parent / config.name} "
            "but no initial commit was made",
            file=sys.stderr,
        )
        return 1

    print("")
    print("Done! Your project is ready:")
    print("")
    for step in result.next_steps:
        print(f"  {step}")
    return 0


def _handle_list() -> int:
    for variant in BLUEPRINTS.values():
        print(f"{variant.name:<12} {variant.description}")
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    prompt: Prompt = input,
    scaffolder: ProjectScaffolder | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "list":
        return _handle_list()

    _configure_logging(args.verbose)
    try:
        variant = get_variant(args.command)
        return _handle_init(
            args,
            variant,
            prompt=prompt,
            scaffolder=scaffolder or ProjectScaffolder(),
        )
    except MeeseeksError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def init_haskell(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``init-haskell``."""

    return main(["haskell", *(sys.argv[1:] if argv is None else argv)])


def init_fullstack(argv: Sequence[str] | None = None) -> int:
    """Entry point for ``init-fullstack``."""

    return main(["fullstack", *(sys.argv[1:] if argv is None else argv)])


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
