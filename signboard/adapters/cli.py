"""
CLI Adapter - Command-line interface.

Thin wrapper over the matcher, the library stores and SignSession.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from signboard.config import SignboardConfig


def main(args: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="signboard",
        description="Turn live speech into a sequence of sign images and clips",
    )
    parser.add_argument("--log-level", help="Log level (debug, info, warning, error)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # match command
    match_parser = subparsers.add_parser("match", help="Show how text maps onto the library")
    match_parser.add_argument("text", help="Text to match")
    match_parser.add_argument("-l", "--library", help="Sign library directory")
    match_parser.add_argument("-w", "--window", type=int, help="Largest phrase window")

    # run command
    run_parser = subparsers.add_parser("run", help="Run a live session")
    run_parser.add_argument("-l", "--library", help="Sign library directory")
    run_parser.add_argument("-d", "--dwell", type=float, help="Seconds per image or fallback")
    run_parser.add_argument("--mic", action="store_true", help="Listen on the microphone instead of stdin")
    run_parser.add_argument("--language", default="en-US", help="Recognition language (with --mic)")

    # library command
    library_parser = subparsers.add_parser("library", help="Manage the sign library")
    library_parser.add_argument("-l", "--library", help="Sign library directory")
    library_sub = library_parser.add_subparsers(dest="library_command", help="Library commands")
    library_sub.add_parser("list", help="List signs")
    add_parser = library_sub.add_parser("add", help="Add or replace a sign")
    add_parser.add_argument("key", help="Word or phrase")
    add_parser.add_argument("file", help="Image, video or data-URL file")
    remove_parser = library_sub.add_parser("remove", help="Remove a sign")
    remove_parser.add_argument("key", help="Word or phrase")

    # version command
    subparsers.add_parser("version", help="Show version")

    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0

    if parsed.command == "version":
        from signboard import __version__
        print(f"signboard {__version__}")
        return 0

    try:
        config = SignboardConfig.from_env(
            library_dir=getattr(parsed, "library", None),
            dwell_seconds=getattr(parsed, "dwell", None),
            max_phrase_window=getattr(parsed, "window", None),
            log_level=parsed.log_level,
            json_logs=parsed.json_logs or None,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    _setup_logging(config)

    if parsed.command == "match":
        return _cmd_match(parsed, config)

    if parsed.command == "run":
        return _cmd_run(parsed, config)

    if parsed.command == "library":
        if parsed.library_command is None:
            library_parser.print_help()
            return 0
        return _cmd_library(parsed, config)

    return 1


def _setup_logging(config: SignboardConfig) -> None:
    from signboard.monitoring import configure_logging

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    configure_logging(config.log_level, json_format=config.json_logs)


def _cmd_match(args: argparse.Namespace, config: SignboardConfig) -> int:
    """Dry-run the matcher against the library."""
    from signboard.compiler import match_text
    from signboard.library import FileLibraryStore, Library

    library = Library(FileLibraryStore(config.library_dir).get_all())
    result = match_text(args.text, library, max_window=config.max_phrase_window)

    if not result:
        print("Nothing to sign.")
        return 0

    print("Units:")
    for unit in result.units:
        if unit.key not in library:
            note = "no sign"
        elif unit.is_phrase:
            note = f"phrase ({unit.token_count} words)"
        else:
            note = library.get(unit.key).kind.value
        print(f"  {unit.key:25} {note}")

    if result.missing:
        print()
        print(f"Missing: {', '.join(result.missing)}")

    return 0


def _cmd_run(args: argparse.Namespace, config: SignboardConfig) -> int:
    """Run a live session until input ends."""
    if args.mic:
        try:
            from signboard.capture.microphone import MicrophoneSource
        except ImportError:
            print("(Install signboard[microphone] to enable microphone capture)", file=sys.stderr)
            return 1

        def source_factory():
            return MicrophoneSource(language=args.language)
    else:
        from signboard.capture import TextStreamSource

        def source_factory():
            return TextStreamSource(sys.stdin)

    try:
        asyncio.run(_run_session(config, source_factory))
    except KeyboardInterrupt:
        print()
    return 0


async def _run_session(config: SignboardConfig, source_factory) -> None:
    from signboard.adapters.console import ConsoleRenderer
    from signboard.capture import CaptureSupervisor
    from signboard.library import FileLibraryStore
    from signboard.runtime import SignSession

    renderer = ConsoleRenderer()
    session = SignSession(FileLibraryStore(config.library_dir), config=config, renderer=renderer)
    renderer.on_complete = session.display_complete

    def on_event(event):
        if event.event_type == "state" and event.data["to"] == "reviewing":
            print(f"Missing signs: {', '.join(session.missing_words)}")
        elif event.event_type == "warning":
            print(f"Warning: {event.data['message']}", file=sys.stderr)
        elif event.event_type == "capture_error":
            print(f"Capture error: {event.data['message']}", file=sys.stderr)

    session.on_event(on_event)
    count = await session.load()
    print(f"Loaded {count} signs from {config.library_dir}")

    supervisor = CaptureSupervisor(source_factory, session)
    supervisor.start()
    try:
        await supervisor.wait()
        await session.join()
    finally:
        await supervisor.stop()
        session.stop()


def _cmd_library(args: argparse.Namespace, config: SignboardConfig) -> int:
    """Handle library subcommands."""
    from signboard.compiler import normalize_key
    from signboard.errors import SignboardError
    from signboard.library import Asset, FileLibraryStore

    store = FileLibraryStore(config.library_dir)

    if args.library_command == "list":
        keys = store.keys()
        if not keys:
            print(f"No signs in {config.library_dir}")
            return 0
        print(f"Signs in {config.library_dir}:")
        print()
        for key in keys:
            entry = store.entry(key)
            print(f"  {key:25} {entry.kind:6} {entry.file}")
        return 0

    try:
        key = normalize_key(args.key)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.library_command == "add":
        path = Path(args.file)
        if not path.exists():
            print(f"Error: File not found: {path}", file=sys.stderr)
            return 1
        data = path.read_bytes()
        payload = data.decode("utf-8", errors="replace").strip() if data.startswith(b"data:") else data
        try:
            asset = Asset.from_payload(payload)
            store.put(key, asset)
        except SignboardError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        print(f"Saved {asset.kind.value} sign '{key}'")
        return 0

    if args.library_command == "remove":
        if key not in store:
            print(f"Error: No sign for '{key}'", file=sys.stderr)
            return 1
        try:
            store.delete(key)
        except SignboardError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        print(f"Removed sign '{key}'")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
