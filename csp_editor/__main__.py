"""
CSP Editor CLI
"""
import argparse
import asyncio
import sys

import structlog

from csp_editor.config.loader import load_settings
from csp_editor.console import ConsoleIO
from csp_editor.editor import EditorSession
from csp_editor.errors import MissingURLError
from csp_editor.fetch import load_initial_directives
from csp_editor.logging_config import setup_logging
from csp_editor.policy import parse_csp

logger = structlog.get_logger()


def build_parser():
    parser = argparse.ArgumentParser(
        prog="csp-editor",
        description="Fetch a site's Content-Security-Policy header and edit it interactively",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Edit the policy served by a site
  python -m csp_editor https://example.com

  # Edit a policy string directly
  python -m csp_editor --policy "default-src 'self'; img-src 'self' data:"

  # Read the report-only header and save to a custom file
  python -m csp_editor https://example.com --header content-security-policy-report-only --output csp.txt
        """
    )
    parser.add_argument('url', nargs='?', help='URL to fetch the policy from')
    parser.add_argument('--policy', help='Policy string to edit instead of fetching one')
    parser.add_argument('--output', help='File the final policy is saved to')
    parser.add_argument('--header', help='Response header holding the policy')
    parser.add_argument('--timeout', type=float, help='HTTP request timeout in seconds')
    parser.add_argument('--log-level', help='Log level (debug, info, warning, error)')
    parser.add_argument('--log-json', action='store_true', default=None,
                        help='Emit logs as JSON')
    return parser


def _require_target(args):
    """Raise MissingURLError unless a URL or an inline policy was given."""
    if not args.url and args.policy is None:
        raise MissingURLError("Please provide a URL as an argument")


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        _require_target(args)
    except MissingURLError as e:
        print(e)
        parser.print_usage(sys.stderr)
        return 2

    settings = load_settings(
        header_name=args.header,
        output_file=args.output,
        request_timeout=args.timeout,
        log_level=args.log_level,
        log_json=args.log_json,
    )
    setup_logging(log_level=settings.log_level, json_format=settings.log_json)
    logger.debug(
        "config_loaded",
        header_name=settings.header_name,
        output_file=settings.output_file,
    )

    io = ConsoleIO()
    if args.policy is not None:
        directives = parse_csp(args.policy)
    else:
        directives = asyncio.run(load_initial_directives(args.url, settings=settings, io=io))

    session = EditorSession(directives=directives, io=io, output_file=settings.output_file)
    session.run()
    return 0


if __name__ == '__main__':
    sys.exit(main())
