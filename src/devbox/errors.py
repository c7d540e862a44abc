# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Exceptions raised by devbox operations.

Only the conditions below abort an operation. Hook failures, malformed
service-local configuration and individual fan-out failures are reported
as warnings and never raised.
"""
from pathlib import Path
from typing import List, Optional, Sequence


class DevboxError(Exception):
    """Base class for all devbox failures."""


class ConfigNotFound(DevboxError):
    """The mandatory project-level configuration file does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Couldn't find devbox project config at {path}")


class ConfigInvalid(DevboxError):
    """The project-level configuration could not be parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error deserializing config {path}: {reason}")


class ServiceNotFound(DevboxError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unable to find service {name}")


class MissingOverlayFile(DevboxError):
    """A compose subcommand was requested for a service without an overlay file."""

    def __init__(self, service: str, action: str = "run"):
        self.service = service
        self.action = action
        super().__init__(f"Failed to {action} {service} - missing docker-compose file")


class NoRepositoryConfigured(DevboxError):
    def __init__(self, service: str):
        self.service = service
        super().__init__(f"No repository configured for {service}")


class SpawnError(DevboxError):
    """The operating system refused to start an external process."""

    def __init__(self, command: Sequence[str], reason: Optional[str] = None):
        self.command = list(command)
        message = f"Unable to spawn `{' '.join(self.command)}`"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def error_chain(error: BaseException) -> List[str]:
    """
    Collects the messages of an exception and of every exception it was raised from.

    :param error: The outermost exception.
    :return: Messages ordered from the outermost to the root cause.
    """
    messages = []
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or current.__class__.__name__)
        current = current.__cause__ or current.__context__
    return messages
