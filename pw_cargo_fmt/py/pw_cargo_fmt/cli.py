# Copyright 2025 The Pigweed Authors
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may not
# use this file except in compliance with the License. You may obtain a copy of
# the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations under
# the License.
"""Command line entry point for ``cargo fmt``."""

import argparse
from collections.abc import Mapping, Sequence
import logging
import os
import sys
from typing import NoReturn

from pw_cargo_fmt.arguments import (
    MESSAGE_FORMATS,
    assemble_rustfmt_args,
    is_info_request,
    validate_manifest_path,
)
from pw_cargo_fmt.errors import CargoFmtError, ConfigurationError
from pw_cargo_fmt.rustfmt import (
    FAILURE,
    format_crate,
    get_rustfmt_info,
)
from pw_cargo_fmt.strategy import Strategy, Verbosity

_LOG = logging.getLogger(__name__)
_PACKAGE_LOGGER = logging.getLogger('pw_cargo_fmt')

# Cargo runs subcommands as `cargo-fmt fmt ...`.
_SUBCOMMAND = 'fmt'
_RAW_ARGS_SEPARATOR = '--'

_LOG_LEVELS = {
    Verbosity.QUIET: logging.WARNING,
    Verbosity.NORMAL: logging.INFO,
    Verbosity.VERBOSE: logging.DEBUG,
}


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors like any other configuration error."""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message)


def _parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog='cargo fmt',
        description=(
            'This utility formats all bin and lib files of the current crate '
            'using rustfmt.'
        ),
        usage='%(prog)s [options] [-- <rustfmt_options>...]',
        allow_abbrev=False,
    )
    parser.add_argument(
        '-q',
        '--quiet',
        action='store_true',
        help='No output printed to stdout',
    )
    parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='Use verbose output',
    )
    parser.add_argument(
        '--version',
        action='store_true',
        help='Print rustfmt version and exit',
    )
    parser.add_argument(
        '-p',
        '--package',
        dest='packages',
        metavar='package',
        action='append',
        default=[],
        help='Specify package to format',
    )
    parser.add_argument(
        '--manifest-path',
        metavar='manifest-path',
        help='Specify path to Cargo.toml',
    )
    parser.add_argument(
        '--message-format',
        metavar='message-format',
        help=f'Specify message-format: {"|".join(MESSAGE_FORMATS)}',
    )
    parser.add_argument(
        '--all',
        dest='format_all',
        action='store_true',
        help='Format all packages, and also their local path-based '
        'dependencies',
    )
    parser.add_argument(
        '--check',
        action='store_true',
        help='Run rustfmt in check mode',
    )
    return parser


def drop_subcommand(argv: Sequence[str]) -> list[str]:
    """Removes the first ``fmt`` token; later ones are kept."""
    args = list(argv)
    if _SUBCOMMAND in args:
        args.remove(_SUBCOMMAND)
    return args


def split_rustfmt_options(
    argv: Sequence[str],
) -> tuple[list[str], list[str]]:
    """Splits arguments into cargo-fmt's own and those after ``--``."""
    args = list(argv)
    if _RAW_ARGS_SEPARATOR not in args:
        return args, []
    index = args.index(_RAW_ARGS_SEPARATOR)
    return args[:index], args[index + 1 :]


def print_usage_to_stderr(parser: argparse.ArgumentParser, reason: str) -> None:
    print(reason, file=sys.stderr)
    parser.print_help(sys.stderr)


def execute(
    argv: Sequence[str], env: Mapping[str, str] | None = None
) -> int:
    """Parses ``argv`` and runs rustfmt, returning the exit status."""
    parser = _parser()
    args, rustfmt_options = split_rustfmt_options(drop_subcommand(argv))

    try:
        opts = parser.parse_args(args)
        verbosity = Verbosity.from_flags(opts.quiet, opts.verbose)
        _PACKAGE_LOGGER.setLevel(_LOG_LEVELS[verbosity])

        if opts.version:
            return get_rustfmt_info(['--version'], env)
        if is_info_request(rustfmt_options):
            return get_rustfmt_info(rustfmt_options, env)

        strategy = Strategy.from_options(opts.format_all, opts.packages)
        rustfmt_args = assemble_rustfmt_args(
            rustfmt_options,
            check=opts.check,
            message_format=opts.message_format,
        )
        manifest_path = validate_manifest_path(opts.manifest_path)
        _LOG.debug('Formatting with strategy %s', strategy)

        return format_crate(
            strategy,
            verbosity,
            rustfmt_args,
            manifest_path=manifest_path,
            env=env,
        )
    except CargoFmtError as err:
        print_usage_to_stderr(parser, str(err))
        return FAILURE


def main(
    argv: Sequence[str] | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ

    logging.basicConfig(format='%(message)s', level=logging.INFO)
    status = execute(argv, env)
    sys.stdout.flush()
    sys.stderr.flush()
    return status
