from __future__ import annotations

import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Any, List

from soupsieve import SelectorSyntaxError

from domstate.core.managers.config_manager import config_manager
from domstate.core.predicate_registry import PREDICATE_HELP_TEXTS, get_predicate, register_all_predicates
from domstate.core.utils.configure_logging import configure_logger
from domtree.builder import DocumentBuilder

logger = logging.getLogger(__name__)

# /pattern/flags, as written in JavaScript regular expression literals
_PATTERN_ARG_RE = re.compile(r"^/(.*)/([a-z]*)$", re.S)
_PATTERN_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}

USAGE_ERROR = 2


def parse_argument(raw: str) -> Any:
    """
    Converts a command line argument into a predicate argument:
    '/pattern/flags' becomes a compiled pattern, 'json:<value>' is decoded as JSON,
    anything else is passed on as a string.
    """
    match = _PATTERN_ARG_RE.match(raw)
    if match and len(raw) > 2:
        flags = 0
        for flag in match.group(2):
            if flag not in _PATTERN_FLAGS:
                logger.debug("Ignoring unsupported pattern flag %r", flag)
                continue
            flags |= _PATTERN_FLAGS[flag]
        return re.compile(match.group(1), flags)
    if raw.startswith("json:"):
        return json.loads(raw[len("json:"):])
    return raw


def _describe(tag) -> str:
    parts = [tag.name]
    if tag.get("id"):
        parts.append(f"#{tag.get('id')}")
    parts.extend(f".{name}" for name in tag.get("class", []))
    return "".join(parts)


def cmd_list(_args: argparse.Namespace) -> int:
    register_all_predicates()
    width = max((len(name) for name in PREDICATE_HELP_TEXTS), default=0)
    for name in sorted(PREDICATE_HELP_TEXTS):
        print(f"  {name:<{width}}  {PREDICATE_HELP_TEXTS[name]}")
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    predicate = get_predicate(args.predicate)
    if predicate is None:
        print(f"❌ Error: Unknown predicate '{args.predicate}'. Use 'domstate list' to see all predicates.",
              file=sys.stderr)
        return USAGE_ERROR

    path = Path(args.file)
    try:
        html = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"❌ Error: Could not read '{path}': {e}", file=sys.stderr)
        return USAGE_ERROR

    try:
        predicate_args = [parse_argument(raw) for raw in args.args]
    except (re.error, json.JSONDecodeError) as e:
        print(f"❌ Error: Invalid argument: {e}", file=sys.stderr)
        return USAGE_ERROR

    document = DocumentBuilder().parse_doc(html)
    try:
        elements = document.select(args.selector)
    except SelectorSyntaxError as e:
        print(f"❌ Error: Invalid selector '{args.selector}': {e}", file=sys.stderr)
        return USAGE_ERROR

    if not elements:
        print(f"❌ Error: No element matches '{args.selector}'.", file=sys.stderr)
        return USAGE_ERROR
    if not args.all:
        elements = elements[:1]

    outcomes: List[bool] = []
    for element in elements:
        result = bool(predicate(element, *predicate_args))
        outcomes.append(result)
        marker = "✅" if result else "❌"
        print(f"{marker} {args.predicate}({_describe(element)}) -> {result}")

    return 0 if all(outcomes) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="domstate", description="Evaluate DOM state predicates against HTML files.")
    parser.add_argument("--log-level", default=None, help="Log level (default: 'debug.level' from settings.json).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List all available predicates.")
    list_parser.set_defaults(func=cmd_list)

    check_parser = subparsers.add_parser("check", help="Evaluate a predicate against matching elements.")
    check_parser.add_argument("file", help="HTML file to load.")
    check_parser.add_argument("selector", help="CSS selector of the element(s) to test.")
    check_parser.add_argument("predicate", help="Predicate name, e.g. is_visible or isVisible.")
    check_parser.add_argument("args", nargs="*", help="Predicate arguments: text, /pattern/flags or json:<value>.")
    check_parser.add_argument("--all", action="store_true", help="Test every matching element instead of the first.")
    check_parser.set_defaults(func=cmd_check)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for running domstate from the command line."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Initialize logging based on configuration
    configure_logger(
        args.log_level or config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.module_levels"),
        silenced_loggers=config_manager.get_nested("debug.silenced_loggers"),
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
