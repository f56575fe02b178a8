#!/usr/bin/env python3
"""
Find Text in Files - Entry Point

Searches every file below a folder for an exact piece of text, encoded with a
chosen charset. Runs as a small desktop window or from the command line.
"""

import argparse
import json
import sys
import time
from pathlib import Path

from tqdm import tqdm

from core.config import Config
from core.data_structures import MatchEntry, SearchRequest
from core.exceptions import EmptyPatternError, PatternEncodingError
from core.file_tree import FileNode
from core.match_list import MatchListListener
from core.search_controller import SearchController
from core.search_task import TaskState
from utils.file_utils import format_size
from utils.i18n import translator as t
from utils.log_utils import setup_logging

POLL_INTERVAL = 0.05


def run_find_text_cli(args, config: Config) -> int:
    """Handles the 'find-text' command; returns the process exit code."""
    root_path = args.root.expanduser()
    if not root_path.exists():
        print(t.get('invalid_root', root_path), file=sys.stderr)
        return 1

    min_length = config.get('min_text_length', 3)
    if len(args.text) < min_length:
        print(t.get('text_too_short', min_length), file=sys.stderr)
        return 1

    settings = config.scan_settings()
    if args.window_size is not None:
        if args.window_size <= 0:
            print(f"{t.get('error')}: --window-size must be positive", file=sys.stderr)
            return 1
        settings = settings._replace(window_size=args.window_size)

    controller = SearchController(settings=settings, default_encoding=config.get('encoding', 'UTF-8'))
    root_node = FileNode(root_path)
    request = SearchRequest(scope=(root_node,), pattern_text=args.text,
                            encoding=args.encoding or controller.last_encoding)

    show_progress = not args.no_progress and args.output == 'text'
    bar = None
    finished = []

    def on_new_search(results, progress):
        nonlocal bar
        if show_progress:
            bar = tqdm(total=progress.maximum, unit='B', unit_scale=True,
                       desc=t.get('scanning'), file=sys.stderr, leave=False)

            def advance(counter):
                # The range arrives from the worker after it has measured the scope
                if bar.total != counter.maximum:
                    bar.total = counter.maximum
                    bar.refresh()
                bar.update(max(0, counter.value - bar.n))
            progress.observe(advance)

    def on_match(source, index0, index1):
        if args.output != 'text':
            return
        for index in range(index0, index1 + 1):
            node = source.get(index)
            line = f"{format_size(node.size()):>10s} | {node.path}"
            if bar is not None:
                bar.write(line)
            else:
                print(line)

    controller.on_new_search = on_new_search
    controller.on_finished = finished.append

    try:
        task = controller.start_request(request)
    except (PatternEncodingError, EmptyPatternError) as e:
        print(f"{t.get('error')}: {e}", file=sys.stderr)
        return 1

    listener = _CallbackListener(on_match)
    controller.results.observe(listener)

    try:
        while not finished:
            if not controller.process_pending():
                time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        controller.dispose()
        if bar is not None:
            bar.close()
        print(f"\n{t.get('interrupted')}", file=sys.stderr)
        return 130
    finally:
        controller.results.unobserve(listener)

    if bar is not None:
        bar.close()

    results = list(controller.results)
    if args.output == 'json':
        entries = [MatchEntry(path=str(node.path), size=node.size(), name=node.name)
                   for node in results]
        print(json.dumps([entry._asdict() for entry in entries], indent=2))
    elif not results:
        print(t.get('no_matches'))
    else:
        print(t.get('matches_summary', len(results)), file=sys.stderr)

    config.set('encoding', request.encoding)
    config.save_config()
    return 0 if task.state == TaskState.COMPLETED else 1


class _CallbackListener(MatchListListener):
    """Adapts a plain function to the MatchList listener interface."""

    def __init__(self, callback):
        self.callback = callback

    def interval_added(self, source, index0, index1):
        self.callback(source, index0, index1)


def run_gui(args, config: Config):
    """Launch the search window for the given folder."""
    # Imported lazily so the command line works without Tk
    from ui.find_text_window import FindTextWindow

    folder = (args.root or Path.cwd()).expanduser()
    window = FindTextWindow(FileNode(folder), config)
    window.run()


def main():
    """Main entry point for GUI and CLI."""
    parser = argparse.ArgumentParser(
        description="Find files containing a piece of text.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog="""
Run without a command to launch the GUI.

Examples:
  python main.py
    (Opens the search window for the current folder)

  python main.py gui ~/notes
    (Opens the search window for ~/notes)

  python main.py find-text ./src "TODO" --encoding UTF-16LE
    (Lists files containing TODO encoded as UTF-16LE)
"""
    )
    parser.add_argument('--lang', choices=['en', 'de'], help='Set language for output')
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logging')
    parser.add_argument('--log-file', type=str, help='Also write log messages to this file')

    subparsers = parser.add_subparsers(dest='command', help='Available commands', required=False)

    # --- GUI Command ---
    gui_parser = subparsers.add_parser('gui', help='Open the search window')
    gui_parser.add_argument('root', type=Path, nargs='?', help='Folder or file to search')

    # --- Find Text Command ---
    find_parser = subparsers.add_parser('find-text', help='Search files for text from the command line')
    find_parser.add_argument('root', type=Path, help='Folder or file to search')
    find_parser.add_argument('text', type=str, help='Text to look for')
    find_parser.add_argument('--encoding', type=str, help='Charset used to encode the text (default from config)')
    find_parser.add_argument('--window-size', type=int, help='Bytes tested per read window')
    find_parser.add_argument('--no-progress', action='store_true', help='Hide the progress bar')
    find_parser.add_argument('--output', choices=['text', 'json'], default='text', help='Output format')

    args = parser.parse_args()

    config = Config()
    setup_logging(args.verbose, args.log_file or config.get('log_file'))
    if args.lang:
        t.set_language(args.lang)
    else:
        t.set_language(config.get('language', 'en'))

    if args.command == 'find-text':
        sys.exit(run_find_text_cli(args, config))

    if args.command is None:
        args.root = None
    try:
        run_gui(args, config)
    except KeyboardInterrupt:
        print("\nApplication interrupted by user.")


if __name__ == "__main__":
    main()
