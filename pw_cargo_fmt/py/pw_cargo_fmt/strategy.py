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
"""Package selection strategy and output verbosity."""

from collections.abc import Sequence
from dataclasses import dataclass
import enum

from pw_cargo_fmt.errors import ConfigurationError


class Verbosity(enum.Enum):
    QUIET = 'quiet'
    NORMAL = 'normal'
    VERBOSE = 'verbose'

    @classmethod
    def from_flags(cls, quiet: bool, verbose: bool) -> 'Verbosity':
        if quiet and verbose:
            raise ConfigurationError(
                'quiet mode and verbose mode are not compatible'
            )
        if quiet:
            return cls.QUIET
        if verbose:
            return cls.VERBOSE
        return cls.NORMAL


class StrategyKind(enum.Enum):
    """Which packages of the workspace get formatted."""

    # Only the package of the current manifest.
    ROOT = 'root'
    # Every workspace package and its local path dependencies.
    ALL = 'all'
    # An explicit list of packages.
    SOME = 'some'


@dataclass(frozen=True)
class Strategy:
    """A resolved package selection.

    Attributes:
        kind: The selection scope.
        packages: Package names, in the order given on the command line.
            Only populated for ``StrategyKind.SOME``.
    """

    kind: StrategyKind
    packages: tuple[str, ...] = ()

    def __post_init__(self):
        if self.kind is StrategyKind.SOME and not self.packages:
            raise ValueError('A SOME strategy requires at least one package')
        if self.kind is not StrategyKind.SOME and self.packages:
            raise ValueError(f'A {self.kind.name} strategy takes no packages')

    @classmethod
    def from_options(
        cls, format_all: bool, packages: Sequence[str]
    ) -> 'Strategy':
        """Picks a strategy from the --all and --package options.

        ``--all`` wins over any explicitly listed packages. Package names are
        neither deduplicated nor checked against the workspace here.
        """
        if format_all:
            return cls(StrategyKind.ALL)
        if packages:
            return cls(StrategyKind.SOME, tuple(packages))
        return cls(StrategyKind.ROOT)
