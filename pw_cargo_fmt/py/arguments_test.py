#!/usr/bin/env python3
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
"""Tests for rustfmt argument assembly."""

from pathlib import Path
import unittest

from parameterized import parameterized  # type: ignore

from pw_cargo_fmt.arguments import (
    assemble_rustfmt_args,
    convert_message_format,
    is_info_request,
    validate_manifest_path,
)
from pw_cargo_fmt.errors import ConfigurationError


class TestConvertMessageFormat(unittest.TestCase):
    """Tests for convert_message_format."""

    @parameterized.expand(
        [
            ('empty', [], ['-l']),
            ('keeps_existing', ['--config', 'x=y'], ['--config', 'x=y', '-l']),
            ('short_flag_present', ['-l'], ['-l']),
            ('long_flag_present', ['--files-with-diff'], ['--files-with-diff']),
        ]
    )
    def test_short(self, _, args, expected):
        convert_message_format('short', args)
        self.assertEqual(args, expected)

    def test_json_appends_emit(self):
        args = ['--edition', '2021']
        convert_message_format('json', args)
        self.assertEqual(args, ['--edition', '2021', '--emit', 'json'])

    @parameterized.expand(
        [
            ('emit_separate', ['--emit', 'files']),
            ('emit_joined', ['--emit=stdout']),
        ]
    )
    def test_json_conflicts_with_emit(self, _, args):
        original = list(args)
        with self.assertRaisesRegex(ConfigurationError, '--emit'):
            convert_message_format('json', args)
        self.assertEqual(args, original)

    def test_json_conflicts_with_check(self):
        args = ['--check']
        with self.assertRaisesRegex(ConfigurationError, '--check'):
            convert_message_format('json', args)
        self.assertEqual(args, ['--check'])

    def test_human_is_noop(self):
        args = ['--check', '--emit', 'files']
        convert_message_format('human', args)
        self.assertEqual(args, ['--check', '--emit', 'files'])

    def test_invalid_value(self):
        with self.assertRaises(ConfigurationError) as context:
            convert_message_format('xml', [])
        message = str(context.exception)
        self.assertIn('xml', message)
        self.assertIn('short|json|human', message)


class TestAssembleRustfmtArgs(unittest.TestCase):
    """Tests for assemble_rustfmt_args."""

    def test_no_options(self):
        self.assertEqual(assemble_rustfmt_args([]), [])

    def test_pass_through_unchanged(self):
        self.assertEqual(
            assemble_rustfmt_args(['--config', 'max_width=80']),
            ['--config', 'max_width=80'],
        )

    def test_check_appended(self):
        self.assertEqual(
            assemble_rustfmt_args(['-v'], check=True), ['-v', '--check']
        )

    def test_check_not_duplicated(self):
        args = assemble_rustfmt_args(['--check'], check=True)
        self.assertEqual(args.count('--check'), 1)

    def test_message_format_applied_after_check(self):
        self.assertEqual(
            assemble_rustfmt_args([], check=True, message_format='short'),
            ['--check', '-l'],
        )

    def test_check_with_json_fails(self):
        with self.assertRaises(ConfigurationError):
            assemble_rustfmt_args([], check=True, message_format='json')

    def test_input_not_modified(self):
        options = ['--emit', 'files']
        assemble_rustfmt_args(options, check=True, message_format='short')
        self.assertEqual(options, ['--emit', 'files'])


class TestValidateManifestPath(unittest.TestCase):
    """Tests for validate_manifest_path."""

    def test_none(self):
        self.assertIsNone(validate_manifest_path(None))

    def test_cargo_toml(self):
        self.assertEqual(
            validate_manifest_path('foo/Cargo.toml'), Path('foo/Cargo.toml')
        )

    def test_other_file(self):
        with self.assertRaisesRegex(ConfigurationError, 'Cargo.toml'):
            validate_manifest_path('foo/bar.txt')


class TestIsInfoRequest(unittest.TestCase):
    """Tests for is_info_request."""

    @parameterized.expand(
        [
            ('help_short', ['-h'], True),
            ('help_long', ['--help'], True),
            ('help_topic', ['--help=config'], True),
            ('version_short', ['-V'], True),
            ('version_long', ['--check', '--version'], True),
            ('print_config', ['--print-config'], True),
            ('print_config_value', ['--print-config=current'], True),
            ('none', [], False),
            ('format_flags', ['--check', '--edition', '2021'], False),
            ('similar_prefix', ['--helpful'], False),
        ]
    )
    def test_is_info_request(self, _, args, expected):
        self.assertEqual(is_info_request(args), expected)


if __name__ == '__main__':
    unittest.main()
