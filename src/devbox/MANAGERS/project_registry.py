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
Loading of projects and lookup of their services.
"""
from pathlib import Path
from typing import List, Optional
from ..errors import ServiceNotFound
from ..MODELS.project_config import ComposeContext, Settings
from ..PARSERS.config_parser import ProjectConfigParser
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS import paths
from .service_manager import ServiceManager

class Project:
    """
    A named collection of services plus the external volumes they share.
    """
    def __init__(self,
                 name: str,
                 overlay_base_path: Path,
                 volumes: List[str],
                 services: List[ServiceManager],
                 context: ComposeContext):
        self.name = name
        self.overlay_base_path = overlay_base_path
        self.volumes = volumes
        self.services = services
        self.context = context

    @property
    def directory(self) -> Path:
        return self.overlay_base_path.parent

    def service_names(self) -> List[str]:
        return [service.name for service in self.services]

    def find_service(self, name: str) -> ServiceManager:
        """
        Looks up a service by name and refreshes its tasks and hooks from disk.

        :param name: The service name.
        :return: The rehydrated service.
        :raises ServiceNotFound: If no service has that name.
        """
        for service in self.services:
            if service.name == name:
                service.rehydrate()
                return service
        raise ServiceNotFound(name)

class ProjectRegistry:
    """
    Builds projects from their configuration under the devbox config root.
    """
    def __init__(self, settings: Optional[Settings] = None, runner: Optional[ProcessRunner] = None):
        """
        :param settings: Process-level settings. Defaults to ``Settings.from_env()``.
        :param runner: Runner shared by every service of loaded projects.
        """
        self.settings = settings or Settings.from_env()
        self.runner = runner or ProcessRunner()
        self.parser = ProjectConfigParser()

    def load(self, name: str) -> Project:
        """
        Loads a project's declared services and volumes.

        :param name: Project name; also the compose project name.
        :return: The loaded project.
        :raises ConfigNotFound: If the project has no ``config.toml``.
        :raises ConfigInvalid: If the config cannot be parsed.
        """
        config = self.parser.parse(paths.project_config_path(self.settings.home, name), name)
        overlay_base_path = paths.project_compose_path(self.settings.home, name)
        context = ComposeContext(project_name=name, base_overlay=overlay_base_path)

        services = [
            ServiceManager(definition, context, self.settings, self.runner)
            for definition in config.services
        ]
        return Project(
            name=name,
            overlay_base_path=overlay_base_path,
            volumes=list(config.volumes),
            services=services,
            context=context,
        )
