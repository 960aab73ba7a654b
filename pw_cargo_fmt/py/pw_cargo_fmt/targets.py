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
"""Resolves the crate targets to format by asking cargo for metadata."""

from collections import defaultdict
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path
import shlex
import subprocess
from typing import Any

from pw_cargo_fmt.arguments import MANIFEST_FILE_NAME
from pw_cargo_fmt.errors import LaunchError, TargetResolutionError
from pw_cargo_fmt.strategy import Strategy, StrategyKind

_LOG = logging.getLogger(__name__)

CARGO_ENV_VAR = 'CARGO'
DEFAULT_CARGO = 'cargo'


@dataclass(frozen=True, order=True)
class Target:
    """A source root of a crate target, such as ``src/lib.rs``.

    Attributes:
        path: Canonical path of the target's root source file.
        kind: The target kind, e.g. ``lib`` or ``bin``.
        edition: The Rust edition the target is compiled with.
    """

    path: Path
    kind: str
    edition: str

    @classmethod
    def from_metadata(cls, target: Mapping[str, Any]) -> 'Target':
        path = Path(target['src_path'])
        try:
            path = path.resolve(strict=True)
        except OSError:
            pass
        return cls(
            path=path,
            kind=target['kind'][0],
            edition=target.get('edition', '2015'),
        )


def cargo_path(env: Mapping[str, str] | None = None) -> str:
    if env is None:
        env = os.environ
    return env.get(CARGO_ENV_VAR) or DEFAULT_CARGO


def manifests_in_parents(path: Path) -> Iterator[Path]:
    """Yields every Cargo.toml from ``path`` up to the filesystem root.

    Manifests are ordered from nearest to ``path`` to farthest.
    """
    path = path.resolve()
    if path.is_file():
        path = path.parent

    while True:
        maybe_manifest = path / MANIFEST_FILE_NAME
        if maybe_manifest.is_file():
            yield maybe_manifest

        if str(path) == path.anchor:
            break
        path = path.parent


def find_manifest(start: Path | None = None) -> Path:
    """Finds the manifest cargo would use when run from ``start``."""
    if start is None:
        start = Path.cwd()
    manifest = next(manifests_in_parents(start), None)
    if manifest is None:
        raise TargetResolutionError(
            f'could not find `{MANIFEST_FILE_NAME}` in `{start}` or any '
            'parent directory'
        )
    return manifest


def cargo_metadata(
    manifest_path: Path | None = None,
    cargo: str = DEFAULT_CARGO,
    env: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """Runs ``cargo metadata`` for workspace packages and returns its JSON."""
    command = [cargo, 'metadata', '--format-version', '1', '--no-deps']
    if manifest_path is not None:
        command.extend(('--manifest-path', str(manifest_path)))

    _LOG.debug('Running: %s', shlex.join(command))
    try:
        result = subprocess.run(
            command,
            capture_output=True,
            env=None if env is None else dict(env),
            check=True,
        )
    except FileNotFoundError:
        raise LaunchError(
            f'Could not run {cargo}, please make sure it is in your PATH.'
        )
    except subprocess.CalledProcessError as err:
        stderr = err.stderr.decode(errors='replace').strip()
        raise TargetResolutionError(f'`cargo metadata` failed: {stderr}')
    except OSError as err:
        raise LaunchError(str(err))

    try:
        return json.loads(result.stdout)
    except (json.JSONDecodeError, UnicodeDecodeError) as err:
        raise TargetResolutionError(
            f'`cargo metadata` produced invalid JSON: {err}'
        )


def _add_targets(
    targets: set[Target], metadata_targets: Iterable[Mapping[str, Any]]
) -> None:
    for target in metadata_targets:
        targets.add(Target.from_metadata(target))


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return False


def _get_targets_root_only(
    manifest_path: Path | None, cargo: str, env: Mapping[str, str] | None
) -> set[Target]:
    metadata = cargo_metadata(manifest_path, cargo, env)
    workspace_root = Path(metadata['workspace_root'])
    current_manifest = (
        manifest_path if manifest_path is not None else find_manifest()
    )
    in_workspace_root = _same_file(workspace_root, current_manifest.parent)

    packages = metadata['packages']
    if len(packages) != 1:
        packages = [
            package
            for package in packages
            if in_workspace_root
            or _same_file(Path(package['manifest_path']), current_manifest)
        ]

    targets: set[Target] = set()
    for package in packages:
        _add_targets(targets, package['targets'])
    return targets


def _get_targets_recursive(
    manifest_path: Path | None,
    cargo: str,
    env: Mapping[str, str] | None,
    targets: set[Target],
    visited: set[str],
) -> None:
    metadata = cargo_metadata(manifest_path, cargo, env)
    package_names = {package['name'] for package in metadata['packages']}

    for package in metadata['packages']:
        _add_targets(targets, package['targets'])

        # Follow local path dependencies that live outside this workspace.
        for dependency in package.get('dependencies', ()):
            dependency_path = dependency.get('path')
            name = dependency['name']
            if dependency_path is None or name in visited:
                continue
            dependency_manifest = Path(dependency_path) / MANIFEST_FILE_NAME
            if dependency_manifest.exists() and name not in package_names:
                visited.add(name)
                _get_targets_recursive(
                    dependency_manifest, cargo, env, targets, visited
                )


def _get_targets_with_hitlist(
    manifest_path: Path | None,
    cargo: str,
    env: Mapping[str, str] | None,
    hitlist: Sequence[str],
) -> set[Target]:
    metadata = cargo_metadata(manifest_path, cargo, env)
    remaining = list(dict.fromkeys(hitlist))

    targets: set[Target] = set()
    for package in metadata['packages']:
        if package['name'] in remaining:
            remaining.remove(package['name'])
            _add_targets(targets, package['targets'])

    if remaining:
        raise TargetResolutionError(
            f'package `{min(remaining)}` is not a member of the workspace'
        )
    return targets


def get_targets(
    strategy: Strategy,
    manifest_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> list[Target]:
    """Lists the targets selected by ``strategy``, sorted by path."""
    cargo = cargo_path(env)

    if strategy.kind is StrategyKind.ROOT:
        targets = _get_targets_root_only(manifest_path, cargo, env)
    elif strategy.kind is StrategyKind.ALL:
        targets = set()
        _get_targets_recursive(manifest_path, cargo, env, targets, set())
    else:
        targets = _get_targets_with_hitlist(
            manifest_path, cargo, env, strategy.packages
        )

    return sorted(targets)


def targets_by_edition(targets: Iterable[Target]) -> dict[str, list[Path]]:
    """Groups target paths by edition, with editions in sorted order."""
    by_edition: defaultdict[str, list[Path]] = defaultdict(list)
    for target in targets:
        _LOG.debug('[%s (%s)] %s', target.kind, target.edition, target.path)
        by_edition[target.edition].append(target.path)
    return dict(sorted(by_edition.items()))
