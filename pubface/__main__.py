"""Print the public address behind every local network interface."""
import argparse
import json
import logging
import os
import sys

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.traceback import Traceback

from pubface.aggregator import PublicInterfaceResolver
from pubface.constants.local import CURRENT_VERSION
from pubface.constants.standalone import TITLE
from pubface.exceptions import ConfigurationError, InterfaceEnumerationError
from pubface.networking.probe import ProbeResult
from pubface.settings import Settings

logger = logging.getLogger(__name__)

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)
EXIT_FAILURE = 1
EXIT_SIGINT = 130


def configure_logging(verbosity: int):
    logging.basicConfig(
        level=LOG_LEVELS[min(verbosity, len(LOG_LEVELS) - 1)],
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M',
        stream=sys.stderr,
    )
    logging.captureWarnings(capture=True)


def build_argparser():
    parser = argparse.ArgumentParser(prog=TITLE, description='Resolve the public IP address of every local network interface.')
    parser.add_argument('--url', help='IP resolution service URL (default: $RESOLV_URL or the built-in service)')
    parser.add_argument('--timeout', type=float, help='Per-probe timeout in seconds (default: $RESOLV_TIMEOUT or 5)')
    parser.add_argument('--nameserver', dest='nameservers', action='append', metavar='IP', help='Nameserver for DNS lookups, may be repeated')
    parser.add_argument('--table', action='store_true', help='Print a table instead of JSON')
    parser.add_argument('-v', '--verbose', action='count', default=0, help='Log more details to stderr (-vv for debug)')
    parser.add_argument('--version', action='version', version=f'{TITLE} {CURRENT_VERSION}')
    return parser


def load_settings(args: argparse.Namespace):
    """Read the settings from the environment, with command line options taking precedence."""
    environ = dict(os.environ)
    if args.url:
        environ['RESOLV_URL'] = args.url
    if args.timeout is not None:
        environ['RESOLV_TIMEOUT'] = str(args.timeout)
    if args.nameservers:
        environ['RESOLV_NAMESERVERS'] = ','.join(args.nameservers)
    return Settings.from_environ(environ)


def render_table(report: list[ProbeResult]):
    table = Table(title='Public interfaces')
    table.add_column('Family')
    table.add_column('Local Address')
    table.add_column('Public IP')
    table.add_column('Hostname')
    table.add_column('Default')

    for result in report:
        table.add_row(
            str(result.family),
            result.local_address or '(default route)',
            result.ip,
            result.name or '',
            'yes' if result.default_interface else '',
        )

    return table


def main(argv: list[str] | None = None):
    args = build_argparser().parse_args(argv)
    configure_logging(args.verbose)

    stderr_console = Console(stderr=True)

    try:
        settings = load_settings(args)
        report = PublicInterfaceResolver(settings).resolve()
    except KeyboardInterrupt:
        return EXIT_SIGINT
    except (ConfigurationError, InterfaceEnumerationError) as e:
        logger.debug('Resolution failed', exc_info=e)
        stderr_console.print(Text.assemble(('Error: ', 'bold red'), str(e)))
        return EXIT_FAILURE
    except Exception as e:  # noqa: BLE001
        stderr_console.print(Traceback.from_exception(type(e), e, e.__traceback__))
        return EXIT_FAILURE

    if args.table:
        Console().print(render_table(report))
    else:
        print(json.dumps([result.to_report_entry() for result in report], indent=2))

    return 0


if __name__ == '__main__':
    sys.exit(main())
