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
Models for project-wide configuration and invocation context.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from .service_definition import ServiceDefinition

class ProjectConfig(BaseModel):
    """
    Parsed contents of a project's ``config.toml``.
    Services keep the order in which they were declared.
    """
    volumes: List[str] = []
    services: List[ServiceDefinition] = []

class ComposeContext(BaseModel):
    """
    Project identity and base overlay location for compose invocations.

    Built once when a project is loaded and passed to every invocation, so
    several projects can be addressed from the same process.
    """
    model_config = ConfigDict(frozen=True)

    project_name: str
    base_overlay: Path

    def environment(self, base: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        """
        Builds the environment for a compose subprocess.

        :param base: Environment to extend. Defaults to the current process environment.
        :return: A new dictionary; neither ``base`` nor ``os.environ`` is modified.
        """
        env = dict(os.environ if base is None else base)
        env["COMPOSE_PROJECT_NAME"] = self.project_name
        env["COMPOSE_FILE"] = str(self.base_overlay)
        return env

class Settings(BaseModel):
    """
    Process-level settings, read from ``DEVBOX_*`` environment variables.
    """
    home: Path = Field(default_factory=lambda: Path.home() / ".config" / "devbox")
    compose_command: str = "docker-compose"
    docker_command: str = "docker"
    git_command: str = "git"
    git_remote: str = "origin"
    git_branch: str = "master"
    max_workers: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "Settings":
        """
        Creates settings from environment variables.

        :param environ: Mapping to read from. Defaults to ``os.environ``.
        :return: Settings with every unset variable left at its default.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field in cls.model_fields:
            raw = environ.get(f"DEVBOX_{field.upper()}")
            if raw:
                values[field] = raw
        return cls(**values)
