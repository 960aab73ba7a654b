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
"""Errors raised while resolving options and running rustfmt."""


class CargoFmtError(Exception):
    """Base class for failures reported to the user with usage help."""


class ConfigurationError(CargoFmtError):
    """Invalid flags or flag combinations, detected before any process runs."""


class LaunchError(CargoFmtError):
    """An external executable could not be started."""


class TargetResolutionError(CargoFmtError):
    """The crate targets for a format strategy could not be determined."""
