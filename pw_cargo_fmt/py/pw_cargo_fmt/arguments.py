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
"""Assembly of the argument list forwarded to rustfmt."""

from collections.abc import Sequence
from pathlib import Path

from pw_cargo_fmt.errors import ConfigurationError

CHECK_FLAG = '--check'
EMIT_FLAG = '--emit'
LIST_FILES_FLAGS = ('-l', '--files-with-diff')

MESSAGE_FORMATS = ('short', 'json', 'human')

MANIFEST_FILE_NAME = 'Cargo.toml'

# rustfmt flags that only print information and never format anything.
_INFO_FLAGS = frozenset(('--print-config', '-h', '--help', '-V', '--version'))
_INFO_FLAG_PREFIXES = ('--help=', '--print-config=')


def is_info_request(rustfmt_args: Sequence[str]) -> bool:
    """True if any forwarded argument is an informational rustfmt flag."""
    return any(
        arg in _INFO_FLAGS or arg.startswith(_INFO_FLAG_PREFIXES)
        for arg in rustfmt_args
    )


def convert_message_format(
    message_format: str, rustfmt_args: list[str]
) -> None:
    """Appends the rustfmt flags that implement a --message-format value.

    Existing entries of ``rustfmt_args`` are never removed or reordered.

    Raises:
        ConfigurationError: The value is unknown, or conflicts with flags
            already present in ``rustfmt_args``.
    """
    contains_emit_mode = False
    contains_check = False
    contains_list_files = False
    for arg in rustfmt_args:
        if arg.startswith(EMIT_FLAG):
            contains_emit_mode = True
        if arg == CHECK_FLAG:
            contains_check = True
        if arg in LIST_FILES_FLAGS:
            contains_list_files = True

    if message_format == 'short':
        if not contains_list_files:
            rustfmt_args.append(LIST_FILES_FLAGS[0])
    elif message_format == 'json':
        if contains_emit_mode:
            raise ConfigurationError(
                f'cannot include {EMIT_FLAG} arg when --message-format is set '
                'to json'
            )
        if contains_check:
            raise ConfigurationError(
                f'cannot include {CHECK_FLAG} arg when --message-format is '
                'set to json'
            )
        rustfmt_args.extend((EMIT_FLAG, 'json'))
    elif message_format != 'human':
        raise ConfigurationError(
            f'invalid --message-format value: {message_format}. Allowed '
            f'values are: {"|".join(MESSAGE_FORMATS)}'
        )


def assemble_rustfmt_args(
    rustfmt_options: Sequence[str],
    check: bool = False,
    message_format: str | None = None,
) -> list[str]:
    """Builds the final rustfmt argument list.

    Starts from the arguments given after ``--``, then appends ``--check``
    if requested and not already present, then applies ``message_format``.
    """
    rustfmt_args = list(rustfmt_options)
    if check and CHECK_FLAG not in rustfmt_args:
        rustfmt_args.append(CHECK_FLAG)
    if message_format is not None:
        convert_message_format(message_format, rustfmt_args)
    return rustfmt_args


def validate_manifest_path(manifest_path: str | None) -> Path | None:
    if manifest_path is None:
        return None
    if not manifest_path.endswith(MANIFEST_FILE_NAME):
        raise ConfigurationError(
            f'the manifest-path must be a path to a {MANIFEST_FILE_NAME} file'
        )
    return Path(manifest_path)
