"""
Entry point for walked.

On exit the working directory of the focused panel is printed to stdout.
"""
import argparse
import curses
import locale
import logging
import os
import sys
import tempfile
import traceback
from pathlib import Path

from . import __version__
from .constants import APP_NAME
from .core.app import WalkedApp
from .core.config import AppConfig, load_config, save_config

LOGGER = logging.getLogger(__name__)

# Ensure UTF-8
try:
    locale.setlocale(locale.LC_ALL, '')
except locale.Error:
    pass


def configure_logging(environ=None):
    """Log to a file when WALKED_DEBUG is set; the screen belongs to curses."""
    env = os.environ if environ is None else environ
    if not env.get('WALKED_DEBUG'):
        return None
    log_path = env.get('WALKED_LOG') or os.path.join(tempfile.gettempdir(), f'{APP_NAME}.log')
    logging.basicConfig(
        level=logging.DEBUG,
        filename=log_path,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )
    return log_path


def build_parser():
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='Modal, keyboard-driven terminal file browser.',
    )
    parser.add_argument(
        'directory',
        nargs='?',
        default=None,
        help='directory to start in (default: current directory)',
    )
    parser.add_argument(
        '-c', '--config',
        default=None,
        help='config file to use; written with the defaults if it does not exist',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def resolve_config(path=None):
    """Load the config, creating the explicitly requested file when missing."""
    if path is None:
        return load_config()
    cfg_path = Path(path).expanduser()
    if not cfg_path.exists():
        config = AppConfig()
        try:
            save_config(config, cfg_path)
        except OSError as exc:
            LOGGER.warning('could not write default config to %s: %s', cfg_path, exc)
        return config
    return load_config(cfg_path)


def main(stdscr, config, start_path):
    app = WalkedApp(stdscr, config, start_path)
    return app.run()


def run(argv=None):
    """Run walked and return process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging()

    start_path = os.path.abspath(os.path.expanduser(args.directory or os.getcwd()))
    if not os.path.isdir(start_path):
        print(f'{APP_NAME}: not a directory: {start_path}', file=sys.stderr)
        return 1

    config = resolve_config(args.config)
    try:
        final_directory = curses.wrapper(main, config, start_path)
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        try:
            curses.endwin()
        except curses.error:
            pass
        print(f'\nError: {e}', file=sys.stderr)
        traceback.print_exc()
        return 1

    if final_directory:
        print(final_directory)
    return 0


def main_cli():
    """Console script entrypoint."""
    return run()


if __name__ == '__main__':
    raise SystemExit(main_cli())
