"""
Entry point for retropanel.
"""
import argparse
import dataclasses
import logging
import os
import signal
import sys

from . import APP_VERSION
from .constants import MEMORY_TIERS
from .console import ConsolePrompt, ConsoleProgress, install_interrupt_handler
from .core import paths
from .core.actions import Outcome, OverwriteChoice
from .core.config import load_config, save_config
from .core.errors import FileOpError, InvalidName, NotFound
from .engine import CancelFlag, Commander, OperationEngine
from .fs import LocalFileSystem
from .panel import LEFT, DirectorySnapshot, Session

if os.environ.get('RETROPANEL_DEBUG'):
    logging.basicConfig(
        level=logging.DEBUG,
        format='[%(levelname)s] %(name)s: %(message)s'
    )

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130


def build_parser():
    parser = argparse.ArgumentParser(
        prog='retropanel',
        description='Two-panel file manager operations over legacy drive paths such as C:\\SRC\\A.TXT.',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {APP_VERSION}')
    parser.add_argument('--config', help='config file (default: ~/.config/retropanel/retropanel.ini)')
    parser.add_argument('--drive', action='append', default=[], metavar='LETTER=DIR',
                        help='map a drive letter to a host directory (repeatable)')
    parser.add_argument('--tier', choices=MEMORY_TIERS, help='memory tier for panel capacity and copy buffer')
    parser.add_argument('-y', '--yes', action='store_true', help='answer Yes to every confirmation')
    parser.add_argument('--overwrite', choices=[choice.value for choice in OverwriteChoice],
                        default=OverwriteChoice.NO.value, help='overwrite answer used with --yes')
    parser.add_argument('--no-save', action='store_true', help='do not persist panel state')

    sub = parser.add_subparsers(dest='command', required=True)

    ls_parser = sub.add_parser('ls', help='list a directory')
    ls_parser.add_argument('path', nargs='?', help='directory (default: the active panel)')

    for name in ('copy', 'move'):
        op_parser = sub.add_parser(name, help=f'{name} entries into a directory')
        op_parser.add_argument('sources', nargs='+', help='entries or masks, all in one directory')
        op_parser.add_argument('dest', help='destination directory')

    delete_parser = sub.add_parser('delete', help='delete entries')
    delete_parser.add_argument('targets', nargs='+', help='entries or masks, all in one directory')

    mkdir_parser = sub.add_parser('mkdir', help='create a directory')
    mkdir_parser.add_argument('path')

    rename_parser = sub.add_parser('rename', help='rename an entry in place')
    rename_parser.add_argument('path')
    rename_parser.add_argument('new_name')

    return parser


def _apply_overrides(config, args):
    drives = dict(config.drives)
    for item in args.drive:
        letter, sep, target = item.partition('=')
        if not sep or not target:
            raise InvalidName(f'Expected LETTER=DIR, got {item!r}')
        drives[paths.drive_letter(letter)] = target
    return dataclasses.replace(config, drives=drives, memory_tier=args.tier or config.memory_tier)


def _split_entries(items):
    """Split full entry paths into their common directory and entry names."""
    parents = set()
    names = []
    for item in items:
        drive, path = paths.split_full(item)
        name = paths.basename(path)
        if not name:
            raise InvalidName('Expected an entry, not a drive root', item)
        parents.add((drive, paths.parent(path)))
        names.append(name)
    if len(parents) != 1:
        raise InvalidName('All entries must be in the same directory')
    drive, directory = parents.pop()
    return drive, directory, names


def _snapshot(fs, config, drive, path):
    return DirectorySnapshot(fs, drive, path, capacity=config.capacity).populate()


def _other_panel(fs, config, fallback):
    """Restore the saved right panel, or mirror ``fallback`` when it is unreadable."""
    try:
        return _snapshot(fs, config, config.right_drive, config.right_path)
    except FileOpError:
        LOGGER.debug('Saved right panel unreadable, mirroring %s', fallback.full_path())
        return _snapshot(fs, config, fallback.drive, fallback.path)


def _select(snapshot, names):
    for name in names:
        if not snapshot.select_matching(name):
            raise NotFound('File not found', snapshot.full_path(name))


def _print_listing(snapshot, out):
    print(f' Directory of {snapshot.full_path()}', file=out)
    files = dirs = 0
    for entry in snapshot.entries:
        print(entry.display_text, file=out)
        if entry.is_parent:
            continue
        if entry.is_dir:
            dirs += 1
        else:
            files += 1
    print(f' {files} file(s), {dirs} dir(s)', file=out)
    if snapshot.truncated:
        print(' (listing truncated)', file=out)


def _exit_code(result):
    if result is None or result.outcome == Outcome.OK:
        return EXIT_OK
    if result.outcome == Outcome.CANCEL:
        return EXIT_CANCELLED
    return EXIT_ERROR


def _session_for(args, fs, config):
    """Lay out the panels a command works on: source left, destination right."""
    if args.command in ('copy', 'move'):
        drive, directory, names = _split_entries(args.sources)
        left = _snapshot(fs, config, drive, directory)
        right = _snapshot(fs, config, *paths.split_full(args.dest))
        _select(left, names)
    elif args.command == 'delete':
        drive, directory, names = _split_entries(args.targets)
        left = _snapshot(fs, config, drive, directory)
        right = _other_panel(fs, config, left)
        _select(left, names)
    else:
        drive, directory, names = _split_entries([args.path])
        left = _snapshot(fs, config, drive, directory)
        right = _other_panel(fs, config, left)
        if args.command == 'rename' and not left.select_name(names[0]):
            raise NotFound('File not found', left.full_path(names[0]))
    return Session(left, right, LEFT), names


def run(argv=None, out=None):
    """Run one command and return the process exit code."""
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    loaded = load_config(args.config)
    config = _apply_overrides(loaded, args)
    fs = LocalFileSystem(config.drives)

    if args.command == 'ls':
        if args.path:
            snapshot = _snapshot(fs, config, *paths.split_full(args.path))
        else:
            snapshot = Session.from_config(config, fs).active
        _print_listing(snapshot, out)
        return EXIT_OK

    prompt = ConsolePrompt(output=out, assume_yes=args.yes, overwrite=args.overwrite)
    cancel = CancelFlag()
    engine = OperationEngine(fs, prompt, ConsoleProgress(), cancel, buffer_size=config.copy_buffer_size)
    session, names = _session_for(args, fs, config)
    commander = Commander(session, engine, prompt, cancel)

    previous = install_interrupt_handler(cancel)
    try:
        if args.command == 'copy':
            result = commander.copy()
        elif args.command == 'move':
            result = commander.move()
        elif args.command == 'delete':
            result = commander.delete()
        elif args.command == 'mkdir':
            result = commander.mkdir(names[0])
        else:
            result = commander.rename(args.new_name)
    finally:
        signal.signal(signal.SIGINT, previous)

    if not args.no_save:
        save_config(session.to_config(loaded), args.config)
    return _exit_code(result)


def main_cli(argv=None):
    """Console script entrypoint."""
    try:
        return run(argv)
    except KeyboardInterrupt:
        return EXIT_CANCELLED
    except FileOpError as exc:
        LOGGER.debug('Command failed', exc_info=True)
        print(exc.describe(), file=sys.stderr)
        return EXIT_ERROR


if __name__ == '__main__':
    raise SystemExit(main_cli())
