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
Parsers for project-level and service-local TOML configuration.
"""
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from ..errors import ConfigInvalid, ConfigNotFound
from ..MODELS.project_config import ProjectConfig
from ..MODELS.service_definition import ServiceConfig, ServiceDefinition
from ..MODELS.task import HookCatalog, HookStage, Task
from ..UTILS import console

class ProjectConfigParser:
    """
    Parser for a project's ``config.toml``.

    Services may be declared as an array of tables::

        [[services]]
        name = "api"
        repo = "https://example.com/api.git"

    or as a table keyed by service name, where ``git`` is accepted as an
    alias for ``repo``::

        [services.api]
        git = "https://example.com/api.git"
    """
    def parse(self, config_path: Path, project_name: str) -> ProjectConfig:
        """
        Parses a project config file.

        :param config_path: Path to ``config.toml``.
        :param project_name: Name assigned to every parsed service.
        :return: Parsed configuration.
        :raises ConfigNotFound: If the file does not exist.
        :raises ConfigInvalid: If the file is not valid project TOML.
        """
        try:
            with open(config_path, "rb") as f:
                raw = f.read()
        except FileNotFoundError as e:
            raise ConfigNotFound(config_path) from e
        try:
            return self.parse_from_string(raw.decode("utf-8"), project_name)
        except (tomllib.TOMLDecodeError, ValidationError, ValueError) as e:
            raise ConfigInvalid(config_path, str(e)) from e

    def parse_from_string(self, content: str, project_name: str) -> ProjectConfig:
        data = tomllib.loads(content)

        services = []
        seen = set()
        for spec in self._service_entries(data.get("services", [])):
            service = self._parse_service(spec, project_name)
            if service.name in seen:
                raise ValueError(f"service {service.name} is declared more than once")
            seen.add(service.name)
            services.append(service)

        raw_volumes = data.get("volumes", [])
        if not isinstance(raw_volumes, list):
            raise ValueError("volumes must be an array of names")
        volumes = []
        for volume in raw_volumes:
            if volume not in volumes:
                volumes.append(volume)

        return ProjectConfig(volumes=volumes, services=services)

    def _service_entries(self, raw: Any) -> List[Dict[str, Any]]:
        """
        Normalizes both service declaration styles into a list of tables with a ``name``.
        """
        if isinstance(raw, list):
            return raw
        if isinstance(raw, dict):
            if not all(isinstance(spec, dict) for spec in raw.values()):
                raise ValueError("each service table must be a table")
            return [{"name": name, **spec} for name, spec in raw.items()]
        raise ValueError("services must be an array of tables or a table")

    def _parse_service(self, spec: Dict[str, Any], project_name: str) -> ServiceDefinition:
        if not isinstance(spec, dict):
            raise ValueError(f"invalid service entry: {spec!r}")
        return ServiceDefinition(
            name=spec.get("name"),
            project_name=project_name,
            repo=spec.get("repo", spec.get("git")),
            path=spec.get("path"),
        )

class ServiceConfigParser:
    """
    Parser for a service's ``.devbox/config.toml``.

    Hook entries name tasks from the same file. Names that do not match a
    task are dropped with a warning.
    """
    def __init__(self, service_name: str):
        """
        :param service_name: Service the config belongs to, used in messages.
        """
        self.service_name = service_name

    def parse_from_string(self, content: str) -> ServiceConfig:
        """
        Parses service-local config.

        :param content: TOML content.
        :return: The tasks and hooks defined by the file.
        :raises tomllib.TOMLDecodeError: If the content is not valid TOML.
        """
        data = tomllib.loads(content)

        tasks = None
        if "tasks" in data:
            try:
                tasks = [Task(**t) for t in data["tasks"]]
            except (TypeError, ValidationError) as e:
                console.warn(f"Invalid tasks for service '{self.service_name}': {e}")
        else:
            console.info(f"No tasks found for service '{self.service_name}'")

        hooks = None
        if "hooks" in data:
            hooks = self._resolve_hooks(data["hooks"], tasks or [])

        return ServiceConfig(tasks=tasks, hooks=hooks)

    def _resolve_hooks(self, raw: Any, tasks: List[Task]) -> Optional[HookCatalog]:
        if not isinstance(raw, dict) or not all(isinstance(v, list) for v in raw.values()):
            console.warn(f"Invalid hooks for service '{self.service_name}'")
            return None

        by_name = {}
        for task in tasks:
            by_name.setdefault(task.name, task)

        catalog = HookCatalog()
        for stage_name, task_names in raw.items():
            resolved = []
            for name in task_names:
                task = by_name.get(name) if isinstance(name, str) else None
                if task is None:
                    console.warn(f"Task `{name}` was not found in the available tasks")
                    continue
                resolved.append(task)

            stage = HookStage.parse(stage_name)
            if stage is None:
                catalog.extra[stage_name] = resolved
            else:
                catalog.stages[stage] = resolved
        return catalog
