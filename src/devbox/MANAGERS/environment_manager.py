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
Project-wide docker environment: network, external volumes and base images.
"""
from typing import List, Optional
from ..MODELS.project_config import ComposeContext, Settings
from ..RUNNERS.compose_command import ComposeCommand, ComposeCommandBuilder
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS import console

class EnvironmentManager:
    """
    Creates and tears down the shared resources a project's services run on.

    Every method blocks on one or more external processes and returns the
    exit status of the last one. Spawn failures raise SpawnError.
    """
    def __init__(self,
                 context: ComposeContext,
                 settings: Optional[Settings] = None,
                 runner: Optional[ProcessRunner] = None):
        """
        :param context: Project identity and base overlay location.
        :param settings: Process-level settings.
        :param runner: Runner used for every external process.
        """
        self.context = context
        self.settings = settings or Settings()
        self.runner = runner or ProcessRunner()
        self.compose = ComposeCommandBuilder(context, self.settings.compose_command)

    def create_network(self) -> int:
        """
        Creates a docker network named after the project. Output is discarded
        because the network usually exists already.
        """
        console.info(f"Creating '{self.context.project_name}' network")
        return self.runner.run(self._docker("network", "create", self.context.project_name), quiet=True)

    def create_volume(self, name: str) -> int:
        console.info(f"Creating volume: {name}")
        return self.runner.run(self._docker("volume", "create", "--name", name), quiet=True)

    def pull_images(self) -> int:
        console.info("Pulling latest images...")
        return self._run(self.compose.for_project("pull"))

    def build_images(self) -> int:
        console.info("Building images...")
        return self._run(self.compose.for_project("build"))

    def start_all(self) -> int:
        return self._run(self.compose.for_project("up", ["-d"]))

    def destroy_environment(self) -> int:
        """
        Stops and removes the project's containers, networks and anonymous volumes.
        """
        return self._run(self.compose.for_project("down", ["-v", "--remove-orphans"]))

    def remove_dangling_images(self) -> int:
        """
        Force-removes every dangling image.

        :return: Exit status of the last removal, or 0 when there was nothing to remove.
        """
        output = self.runner.capture(self._docker("images", "-q", "-f", "dangling=true"))
        image_ids = [line.strip() for line in output.splitlines() if line.strip()]
        exit_code = 0
        for image_id in image_ids:
            exit_code = self.runner.run(self._docker("rmi", "-f", image_id))
        return exit_code

    def _docker(self, *args: str) -> List[str]:
        return [self.settings.docker_command, *args]

    def _run(self, command: ComposeCommand) -> int:
        return self.runner.run(command.argv, env=command.environment())
