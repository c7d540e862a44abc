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
Construction of layered compose invocations.
"""
import shlex
from pathlib import Path
from typing import List, Sequence
from ..MODELS.project_config import ComposeContext

class ComposeCommand:
    """
    A compose command line together with the environment it must run in.
    """
    def __init__(self, argv: List[str], context: ComposeContext):
        self.argv = argv
        self.context = context

    def environment(self):
        return self.context.environment()

    def __repr__(self):
        return f"ComposeCommand({' '.join(self.argv)!r})"

class ComposeCommandBuilder:
    """
    Builds every compose invocation devbox issues.

    Service invocations layer the service's overlay after the project's base
    file, so the service can override base networks and volumes for itself.
    Overlay existence is not checked here.
    """
    def __init__(self, context: ComposeContext, program: str = "docker-compose"):
        """
        :param context: Project identity and base overlay location.
        :param program: Compose executable, optionally with leading arguments (e.g. ``docker compose``).
        """
        self.context = context
        self.program = shlex.split(program)

    def for_service(self, overlay: Path, subcommand: str, args: Sequence[str] = ()) -> ComposeCommand:
        """
        Builds ``<program> -f <base> -f <overlay> --project-directory <overlay dir> <subcommand> <args>``.

        :param overlay: The service's compose overlay file.
        :param subcommand: Compose subcommand, e.g. ``build``.
        :param args: Arguments following the subcommand.
        """
        overlay = Path(overlay)
        argv = [
            *self.program,
            "-f", str(self.context.base_overlay),
            "-f", str(overlay),
            "--project-directory", str(overlay.parent),
            subcommand,
        ]
        argv.extend(args)
        return ComposeCommand(argv, self.context)

    def for_project(self, subcommand: str, args: Sequence[str] = ()) -> ComposeCommand:
        """
        Builds an invocation against the project's base file only.
        """
        argv = [*self.program, "-f", str(self.context.base_overlay), subcommand]
        argv.extend(args)
        return ComposeCommand(argv, self.context)
