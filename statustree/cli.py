"""Command-line front door for statustree.

Parses CLI options, resolves the working tree, and runs a full git refresh.
Then prints the status tree, optionally followed by a colorized diff.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from . import config
from .errors import StatusTreeError, format_error
from .git_status import GitStatusProvider, collect_diff_text, resolve_git_paths
from .highlight import DEFAULT_STYLE, colorize_diff
from .logging import configure_logging
from .runtime import StatusView
from .tree_model.rendering import ThemedRowRenderer
from .ui_theme import available_theme_names, resolve_theme
from .watch import build_watch_signature

PUMP_INTERVAL_SECONDS = 0.05


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print the version-control status tree of a working directory.")
    parser.add_argument("path", nargs="?", default=None, help="Working tree directory. Defaults to current directory.")
    parser.add_argument("--hide-up-to-date", action="store_true", default=None, help="Hide up-to-date files.")
    parser.add_argument(
        "--show-up-to-date",
        dest="hide_up_to_date",
        action="store_false",
        default=None,
        help="Show up-to-date files even when the saved default hides them.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--batch-size", type=_positive_int, default=None, help="Rows per status batch.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Seconds before a git call is abandoned.")
    parser.add_argument("--diff", action="store_true", help="Print a diff of the changed files after the tree.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --diff.")
    parser.add_argument(
        "--watch",
        type=_positive_float,
        default=None,
        metavar="SECONDS",
        help="Keep polling and reprint the tree whenever the working tree changes.",
    )
    parser.add_argument("--log-level", default="warning", help="Logging level (debug, info, warning, error).")
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store the given --batch-size, --timeout, --theme and up-to-date choice as defaults.",
    )
    return parser


def save_defaults(args: argparse.Namespace) -> None:
    """Persist the options given on this command line; omitted ones keep their saved value."""
    if args.batch_size is not None:
        config.save_batch_size(args.batch_size)
    if args.timeout is not None:
        config.save_git_timeout(args.timeout)
    if args.hide_up_to_date is not None:
        config.save_hide_up_to_date(args.hide_up_to_date)
    if args.theme:
        config.save_theme_name(args.theme)


def run_refresh(view: StatusView, provider: GitStatusProvider) -> None:
    """Run one full refresh, pumping provider batches until the view is idle."""
    view.refresh()
    while view.busy:
        provider.pump(timeout=PUMP_INTERVAL_SECONDS)
    error = view.controller.last_error
    if error is not None:
        raise error


def render_tree(view: StatusView) -> str:
    return "".join(line + "\n" for line in view.lines())


def render_diff(view: StatusView, style: str, no_color: bool, timeout_seconds: float) -> str:
    paths = [entry.path for entry in view.store if not entry.is_header]
    return colorize_diff(collect_diff_text(view.root, paths, timeout_seconds), style, no_color)


def _watch_signature(view: StatusView, git_dir: Path | None) -> str:
    rows = [Path(entry.path.rstrip("/")) for entry in view.store if entry.path != "."]
    return build_watch_signature(view.root, git_dir, rows)


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and print the status tree for a working directory.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args()
    configure_logging(level=args.log_level, format_name="text", stream=sys.stderr)

    if default_path is None:
        default_path = Path.cwd()
    root = Path(args.path or default_path)
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    if args.save_defaults:
        save_defaults(args)

    no_color = args.no_color or not sys.stdout.isatty()
    batch_size = args.batch_size if args.batch_size is not None else config.load_batch_size()
    timeout_seconds = args.timeout if args.timeout is not None else config.load_git_timeout()
    hide = args.hide_up_to_date if args.hide_up_to_date is not None else config.load_hide_up_to_date()
    theme = resolve_theme(args.theme or config.load_theme_name(), no_color=no_color)

    provider = GitStatusProvider(root, batch_size=batch_size, timeout_seconds=timeout_seconds)
    view = StatusView(root, provider, renderer=ThemedRowRenderer(theme), hide_up_to_date=hide)
    try:
        run_refresh(view, provider)
        sys.stdout.write(render_tree(view))
        if args.diff:
            sys.stdout.write(render_diff(view, args.style, no_color, timeout_seconds))
        if args.watch is None:
            return

        _repo_root, git_dir = resolve_git_paths(view.root, timeout_seconds)
        signature = _watch_signature(view, git_dir)
        while True:
            time.sleep(args.watch)
            current = _watch_signature(view, git_dir)
            if current == signature:
                continue
            run_refresh(view, provider)
            signature = _watch_signature(view, git_dir)
            sys.stdout.write("\n" + render_tree(view))
            sys.stdout.flush()
    except StatusTreeError as exc:
        sys.stderr.write(format_error(exc) + "\n")
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        view.cancel()
