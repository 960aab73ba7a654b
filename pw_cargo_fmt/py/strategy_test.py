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
"""Tests for package strategy and verbosity selection."""

import unittest

from parameterized import parameterized  # type: ignore

from pw_cargo_fmt.errors import ConfigurationError
from pw_cargo_fmt.strategy import Strategy, StrategyKind, Verbosity


class TestStrategy(unittest.TestCase):
    """Tests for Strategy.from_options."""

    @parameterized.expand(
        [
            ('all_without_packages', True, []),
            ('all_with_packages', True, ['foo', 'bar']),
        ]
    )
    def test_format_all_wins(self, _, format_all, packages):
        strategy = Strategy.from_options(format_all, packages)
        self.assertEqual(strategy, Strategy(StrategyKind.ALL))

    def test_packages_keep_order_and_duplicates(self):
        strategy = Strategy.from_options(False, ['b', 'a', 'b'])
        self.assertIs(strategy.kind, StrategyKind.SOME)
        self.assertEqual(strategy.packages, ('b', 'a', 'b'))

    def test_no_options_is_root(self):
        self.assertEqual(
            Strategy.from_options(False, []), Strategy(StrategyKind.ROOT)
        )

    def test_some_requires_packages(self):
        with self.assertRaises(ValueError):
            Strategy(StrategyKind.SOME)

    def test_root_rejects_packages(self):
        with self.assertRaises(ValueError):
            Strategy(StrategyKind.ROOT, ('foo',))


class TestVerbosity(unittest.TestCase):
    """Tests for Verbosity.from_flags."""

    @parameterized.expand(
        [
            ('normal', False, False, Verbosity.NORMAL),
            ('quiet', True, False, Verbosity.QUIET),
            ('verbose', False, True, Verbosity.VERBOSE),
        ]
    )
    def test_valid_flags(self, _, quiet, verbose, expected):
        self.assertIs(Verbosity.from_flags(quiet, verbose), expected)

    def test_quiet_and_verbose_conflict(self):
        with self.assertRaisesRegex(ConfigurationError, 'not compatible'):
            Verbosity.from_flags(quiet=True, verbose=True)


if __name__ == '__main__':
    unittest.main()
