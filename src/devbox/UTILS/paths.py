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
Well-known locations of project and service configuration files.
"""
from pathlib import Path

PROJECT_CONFIG_FILE = "config.toml"
PROJECT_COMPOSE_FILE = "docker-compose.yml"

SERVICE_CONFIG_DIR = ".devbox"
SERVICE_COMPOSE_PATH = Path(SERVICE_CONFIG_DIR) / "docker-compose.yml"
SERVICE_CONFIG_PATH = Path(SERVICE_CONFIG_DIR) / "config.toml"

def project_dir(home: Path, project_name: str) -> Path:
    """
    Returns the directory holding a project's config and cloned sources.

    :param home: Devbox config root, usually ``~/.config/devbox``.
    :param project_name: Name of the project.
    """
    return Path(home) / project_name

def project_config_path(home: Path, project_name: str) -> Path:
    return project_dir(home, project_name) / PROJECT_CONFIG_FILE

def project_compose_path(home: Path, project_name: str) -> Path:
    return project_dir(home, project_name) / PROJECT_COMPOSE_FILE

def default_source_path(home: Path, project_name: str, service_name: str) -> Path:
    """
    Source location used for services that do not declare a ``path``.
    """
    return project_dir(home, project_name) / "src" / service_name
