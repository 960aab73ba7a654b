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
"""Runs rustfmt and maps its outcome to an exit status."""

from collections.abc import Callable, Mapping, Sequence
import logging
import os
from pathlib import Path
import shlex
import subprocess
from typing import IO

from pw_cargo_fmt.errors import LaunchError
from pw_cargo_fmt.strategy import Strategy, Verbosity
from pw_cargo_fmt.targets import Target, get_targets, targets_by_edition

_LOG = logging.getLogger(__name__)

SUCCESS = 0
FAILURE = 1

RUSTFMT_ENV_VAR = 'RUSTFMT'
DEFAULT_RUSTFMT = 'rustfmt'

TargetResolver = Callable[
    [Strategy, Path | None, Mapping[str, str] | None], Sequence[Target]
]


def rustfmt_path(env: Mapping[str, str] | None = None) -> str:
    """The rustfmt executable: $RUSTFMT if set, otherwise found on PATH."""
    if env is None:
        env = os.environ
    return env.get(RUSTFMT_ENV_VAR) or DEFAULT_RUSTFMT


def exit_status(returncode: int) -> int:
    """Maps a process return code to this program's exit status."""
    if returncode == 0:
        return SUCCESS
    # Killed by a signal; there is no exit code to forward.
    if returncode < 0:
        return SUCCESS
    return returncode


def _run(
    command: Sequence[str],
    stdout: int | IO | None = None,
    env: Mapping[str, str] | None = None,
) -> int:
    _LOG.debug('%s', shlex.join(command))
    try:
        result = subprocess.run(
            command,
            stdout=stdout,
            env=None if env is None else dict(env),
            check=False,
        )
    except FileNotFoundError:
        raise LaunchError(
            'Could not run rustfmt, please make sure it is in your PATH.'
        )
    except OSError as err:
        raise LaunchError(str(err))
    return result.returncode


def get_rustfmt_info(
    args: Sequence[str], env: Mapping[str, str] | None = None
) -> int:
    """Runs rustfmt with exactly ``args`` for --version, --help and friends."""
    return exit_status(_run([rustfmt_path(env), *args], env=env))


def run_rustfmt(
    targets: Sequence[Target],
    rustfmt_args: Sequence[str],
    verbosity: Verbosity,
    env: Mapping[str, str] | None = None,
) -> int:
    """Formats ``targets``, running rustfmt once per edition.

    Returns:
        The first non-zero exit status, or SUCCESS if every run succeeded.
    """
    rustfmt = rustfmt_path(env)
    stdout = subprocess.DEVNULL if verbosity is Verbosity.QUIET else None

    status = SUCCESS
    for edition, files in targets_by_edition(targets).items():
        command = [
            rustfmt,
            *(str(f) for f in files),
            '--edition',
            edition,
            *rustfmt_args,
        ]
        returncode = exit_status(_run(command, stdout=stdout, env=env))
        if status == SUCCESS:
            status = returncode
    return status


def format_crate(
    strategy: Strategy,
    verbosity: Verbosity,
    rustfmt_args: Sequence[str],
    manifest_path: Path | None = None,
    env: Mapping[str, str] | None = None,
    resolver: TargetResolver = get_targets,
) -> int:
    """Formats every target selected by ``strategy``."""
    targets = resolver(strategy, manifest_path, env)
    if not targets:
        _LOG.info('No targets to format')
        return SUCCESS
    return run_rustfmt(targets, rustfmt_args, verbosity, env)
