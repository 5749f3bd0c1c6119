"""Main entry point for chandl."""
import argparse
import logging
import os
from typing import List, Optional

from . import __version__
from .config import Config
from .models import DownloadRequest
from .thread_manager import ThreadManager

log = logging.getLogger('chandl')

COMMANDS = ('download', 'update')


def create_config_from_args(args: argparse.Namespace) -> Config:
    """Create a Config object from parsed arguments.

    Args:
        args: Parsed command-line arguments.

    Returns:
        A Config object with settings from arguments.
    """
    return Config(
        workpath=os.getcwd(),
        quiet=getattr(args, 'quiet', False),
        debug=getattr(args, 'debug', False),
        numbered=not getattr(args, 'not_numbered', False),
    )


def setup_logging(config: Config) -> None:
    """Set up logging configuration.

    Args:
        config: Configuration settings.
    """
    if config.debug:
        level = logging.DEBUG
    elif config.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format='[%(asctime)s] %(message)s',
        datefmt='%I:%M:%S %p'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='chandl',
        description='Download the images of 4chan threads',
        epilog='Use "chandl update" to refresh every thread listed in threads.txt.'
    )

    parser.add_argument(
        'command',
        nargs='?',
        help='"download" (default) or "update", or the url of the thread'
    )
    parser.add_argument(
        'url',
        nargs='?',
        help='url of the thread when the download command is given explicitly'
    )
    parser.add_argument(
        '-i', '--iqdb',
        action='store_true',
        help='gather hi-res images through iqdb.org (archive sites)'
    )
    parser.add_argument(
        '-d', '--dir',
        dest='directory',
        metavar='DIRECTORY',
        help='save files to DIRECTORY'
    )
    parser.add_argument(
        '--name',
        help='name the thread directory "ID - NAME" instead of using the thread subject'
    )
    parser.add_argument(
        '-o', '--override',
        action='store_true',
        help='override existing files'
    )
    parser.add_argument(
        '-n', '--not-numbered',
        action='store_true',
        help='do not print image number in output'
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='only print warnings and errors'
    )
    parser.add_argument(
        '-D', '--debug',
        action='store_true',
        help='enable debug output'
    )
    parser.add_argument(
        '-u', '--update-modify-date',
        dest='stamp_mtime',
        action='store_true',
        help='set the modify date of every image to now, so images sort in posting order'
    )
    parser.add_argument(
        '-e', '--print-existing',
        action='store_true',
        help='report images that already exist when updating'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the script.

    Downloads a single thread, or with `update`, every thread listed in the
    threads file of the current directory.
    """
    parser = build_parser()
    args = parser.parse_intermixed_args(argv)

    command = args.command
    url = args.url
    if command not in COMMANDS:
        command, url = 'download', command
    if command == 'update' and url:
        parser.error('update takes no url')
    if command == 'download' and not url:
        parser.error('the following argument is required: url')

    config = create_config_from_args(args)
    setup_logging(config)
    manager = ThreadManager(config)

    if command == 'update':
        if args.iqdb:
            log.warning('--iqdb is not supported by update and is ignored')
        manager.update(
            override=args.override,
            stamp_mtime=args.stamp_mtime,
            print_existing=args.print_existing,
        )
        return

    request = DownloadRequest(
        url=url.strip(),
        directory=args.directory,
        name=args.name,
        iqdb=args.iqdb,
        override=args.override,
        stamp_mtime=args.stamp_mtime,
    )
    manager.download(request)


if __name__ == '__main__':
    try:
        main()
    except KeyboardInterrupt:
        pass
