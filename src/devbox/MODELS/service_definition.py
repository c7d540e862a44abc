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
Static definition of a service as declared in a project's config.
"""
from typing import List, Optional
from pydantic import BaseModel
from .task import HookCatalog, Task

class ServiceDefinition(BaseModel):
    """
    A service entry from the project-level config.

    ``repo`` and ``path`` may both be set; when ``path`` is present it is the
    source location and ``repo`` is never cloned.
    """
    name: str
    project_name: str = ""
    repo: Optional[str] = None
    path: Optional[str] = None

class ServiceConfig(BaseModel):
    """
    Tasks and resolved hooks read from a service's own ``.devbox/config.toml``.
    ``None`` means the file did not define them.
    """
    tasks: Optional[List[Task]] = None
    hooks: Optional[HookCatalog] = None
