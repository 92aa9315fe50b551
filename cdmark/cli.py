#!/usr/bin/env python3
"""
cdmark - directory bookmarks

Command-line interface over the bookmark store. Every command loads the
bookmark file, runs one operation and exits; the shell functions printed by
``cdmark shell-init`` wrap these commands for day-to-day use.
"""
import os
import sys
import argparse
import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional
from rich.console import Console
from rich.markup import escape

from cdmark import __version__
from cdmark.config import init_config, get_config, user_config_path
from cdmark.errors import BookmarkError
from cdmark.models import BookmarkKind, Listing
from cdmark.operations import (
    add_bookmark,
    bookmark_names,
    clear_bookmarks,
    goto_bookmark,
    list_bookmarks,
    remove_bookmark,
    rename_bookmark,
    unname_bookmark,
)
from cdmark.shell import render_init_script
from cdmark.store import RecordStore

logger = logging.getLogger(__name__)


console = Console(highlight=False, emoji=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, emoji=False, soft_wrap=True)


def get_store(args) -> RecordStore:
    """Build the record store for this invocation."""
    return RecordStore(getattr(args, "file", None))


def printable(text: str) -> str:
    """Make a filesystem string safe for the console, replacing undecodable bytes."""
    return os.fsencode(text).decode("utf-8", errors="replace")


def write_raw(text: str):
    """Write a line to stdout as filesystem bytes, for output read by the shell."""
    sys.stdout.flush()
    sys.stdout.buffer.write(os.fsencode(text) + b"\n")
    sys.stdout.buffer.flush()


def format_listing(listing: Listing) -> List[str]:
    """Render a listing as rich-markup lines."""
    if listing.is_empty:
        if listing.hidden_bound:
            return [
                f"No normal bookmarks, but you have {listing.hidden_bound} bound bookmark(s). "
                f"Use 'cdmark list --bound' to see them."
            ]
        return ["No saved bookmarks."]

    lines = []
    for entry in listing.entries:
        line = f"{entry.index:2d}  "
        if entry.record.name:
            line += f"({escape(printable(entry.record.name))})   "
        line += escape(printable(entry.display_path))
        if entry.record.is_bound:
            line += " [yellow](bound)[/yellow]"
        if entry.current:
            line += " [green]*[/green]"
        lines.append(line)
    return lines


def cmd_add(args):
    """Add a directory bookmark."""
    store = get_store(args)
    kind = BookmarkKind.BOUND if args.bound else BookmarkKind.NORMAL

    placement = add_bookmark(store, directory=args.dir, kind=kind, name=args.name)

    if not args.quiet:
        description = escape(printable(placement.record.describe()))
        console.print(f"Added {kind.label} bookmark: {description}")


def cmd_list(args):
    """List bookmarks."""
    store = get_store(args)
    config = get_config()
    relative = config.relative_paths if args.relative is None else args.relative

    listing = list_bookmarks(store, include_bound=args.bound, relative=relative)

    for line in format_listing(listing):
        console.print(line)


def cmd_go(args):
    """Print the directory of a bookmark for the shell wrapper to cd into."""
    store = get_store(args)
    path = goto_bookmark(store, args.key)
    # Raw bytes: this output is captured by $(...)
    write_raw(path)


def cmd_name(args):
    """Assign or change the name of a bookmark."""
    store = get_store(args)
    rename_bookmark(store, args.key, args.new_name)

    if not args.quiet:
        console.print(f"Renamed bookmark '{escape(args.key)}' to '{escape(args.new_name)}'")


def cmd_unname(args):
    """Remove the name of a bookmark."""
    store = get_store(args)
    unname_bookmark(store, args.key)

    if not args.quiet:
        console.print(f"Removed name from bookmark '{escape(args.key)}'")


def cmd_remove(args):
    """Remove a single bookmark."""
    store = get_store(args)
    placement = remove_bookmark(store, args.key, bound=args.bound)

    if not args.quiet:
        description = escape(printable(placement.record.describe()))
        console.print(f"Removed bookmark #{placement.index}: {description}")


def cmd_clear(args):
    """Remove all normal bookmarks."""
    store = get_store(args)
    removed = clear_bookmarks(store)

    if args.quiet:
        print(removed)
    elif removed:
        console.print(f"Cleared {removed} normal bookmark(s); bound bookmarks are kept.")
    else:
        console.print("No normal bookmarks to clear.")


def cmd_names(args):
    """Print bookmark names, one per line (used by shell completion)."""
    store = get_store(args)
    for name in bookmark_names(store, include_bound=not args.normal_only):
        write_raw(name)


def cmd_shell_init(args):
    """Print the shell integration script."""
    sys.stdout.write(render_init_script(args.shell, command=args.command_name))


def cmd_config(args):
    """Manage configuration."""
    config = get_config()

    if args.action == "show":
        if args.key:
            if args.key not in asdict(config):
                err_console.print(f"[red]Unknown config key: {escape(args.key)}[/red]")
                sys.exit(1)
            print(getattr(config, args.key))
        else:
            print(json.dumps(asdict(config), indent=2))

    elif args.action == "init":
        config_path = config.save(Path(args.key) if args.key else user_config_path())
        if not args.quiet:
            console.print(f"[green]Created config at {escape(str(config_path))}[/green]")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cdmark",
        description="cdmark - save, list and jump to directory bookmarks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cdmark add                      # bookmark the current directory
  cdmark add ~/src/project -n proj
  cdmark add /etc --bound -n etc  # bound bookmarks are kept by 'clear'
  cdmark list --bound --relative
  cd "$(cdmark go proj)"
  cdmark name 2 logs
  cdmark unname logs
  cdmark remove 1
  cdmark remove etc --bound
  cdmark clear

Shell integration (addcd, lcd, gocd, rcd, namecd, clearcd):
  eval "$(cdmark shell-init bash)"

Configuration:
  Default bookmark file: ~/.dir_bookmarks
  Config file: ~/.config/cdmark/config.toml
  Environment: CDMARK_BOOKMARK_FILE, CDMARK_PATH_FORMAT, CDMARK_LOG_LEVEL
        """
    )

    # Global options
    parser.add_argument("--file", "-f", help="Bookmark file (default: ~/.dir_bookmarks)")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    # add
    add_parser = subparsers.add_parser("add", help="Bookmark a directory")
    add_parser.add_argument("dir", nargs="?", help="Directory (default: current directory)")
    add_parser.add_argument("-b", "--bound", action="store_true",
                            help="Add a bound bookmark (kept by 'clear', listed last)")
    add_parser.add_argument("-n", "--name", nargs="?", const=None,
                            help="Unique name for the bookmark (a bare -n adds it unnamed)")
    add_parser.set_defaults(func=cmd_add)

    # list
    list_parser = subparsers.add_parser("list", aliases=["ls"], help="List bookmarks")
    list_parser.add_argument("-b", "--bound", action="store_true",
                             help="Also list bound bookmarks")
    path_group = list_parser.add_mutually_exclusive_group()
    path_group.add_argument("-r", "--relative", dest="relative", action="store_const", const=True,
                            help="Show paths relative to the current directory")
    path_group.add_argument("-a", "--absolute", dest="relative", action="store_const", const=False,
                            help="Show absolute paths")
    list_parser.set_defaults(func=cmd_list, relative=None)

    # go
    go_parser = subparsers.add_parser("go", help="Print the directory of a bookmark")
    go_parser.add_argument("key", help="Bookmark name or index")
    go_parser.set_defaults(func=cmd_go)

    # name
    name_parser = subparsers.add_parser("name", help="Assign or change a bookmark's name")
    name_parser.add_argument("key", help="Bookmark name or index")
    name_parser.add_argument("new_name", help="New name")
    name_parser.set_defaults(func=cmd_name)

    # unname
    unname_parser = subparsers.add_parser("unname", help="Remove a bookmark's name")
    unname_parser.add_argument("key", help="Bookmark name or index")
    unname_parser.set_defaults(func=cmd_unname)

    # remove
    remove_parser = subparsers.add_parser("remove", aliases=["rm"], help="Remove a bookmark")
    remove_parser.add_argument("key", help="Bookmark name or index")
    remove_parser.add_argument("-b", "--bound", action="store_true",
                               help="Required to remove a bound bookmark")
    remove_parser.set_defaults(func=cmd_remove)

    # clear
    clear_parser = subparsers.add_parser("clear", help="Remove all normal bookmarks")
    clear_parser.set_defaults(func=cmd_clear)

    # names
    names_parser = subparsers.add_parser("names", help="Print bookmark names (for completion)")
    names_parser.add_argument("--normal-only", action="store_true",
                              help="Skip names of bound bookmarks")
    names_parser.set_defaults(func=cmd_names)

    # shell-init
    shell_parser = subparsers.add_parser("shell-init", help="Print shell integration functions")
    shell_parser.add_argument("shell", nargs="?", default="bash", choices=["bash", "zsh"],
                              help="Target shell (default: bash)")
    shell_parser.add_argument("--command", dest="command_name", default="cdmark",
                              help="How to invoke cdmark from the shell (default: cdmark)")
    shell_parser.set_defaults(func=cmd_shell_init)

    # config
    config_parser = subparsers.add_parser("config", help="Manage configuration")
    config_parser.add_argument("action", choices=["show", "init"], help="Config action")
    config_parser.add_argument("key", nargs="?",
                               help="Config key (show) or target file (init)")
    config_parser.set_defaults(func=cmd_config)

    return parser


def configure_logging(level: str):
    """Route log records to stderr at the given level."""
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    logging.getLogger().setLevel(level)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    global console, err_console

    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config_args = {}
        if args.no_color:
            config_args["color_output"] = False
        config = init_config(
            bookmark_file=args.file,
            config_file=Path(args.config) if args.config else None,
            **config_args
        )
        configure_logging("DEBUG" if args.verbose else config.log_level.upper())

        if not config.color_output:
            console = Console(highlight=False, emoji=False, no_color=True, soft_wrap=True)
            err_console = Console(stderr=True, highlight=False, emoji=False, no_color=True, soft_wrap=True)

        args.func(args)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except BookmarkError as e:
        err_console.print(f"[red]Error: {escape(printable(str(e)))}[/red]")
        sys.exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        err_console.print(f"[red]Error: {escape(printable(str(e)))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
