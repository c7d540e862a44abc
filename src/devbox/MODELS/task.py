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
Models for service tasks and the lifecycle hooks that run them.
"""
from typing import Dict, List
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

class HookStage(str, Enum):
    """
    Lifecycle stages around which hook tasks are run.
    """
    BEFORE_BUILD = "before-build"
    AFTER_BUILD = "after-build"
    BEFORE_UPDATE = "before-update"
    AFTER_UPDATE = "after-update"

    @classmethod
    def parse(cls, name: str):
        """
        Maps a configured stage name onto a known stage.

        :param name: Stage name as written in the service config.
        :return: The matching HookStage, or None for stages devbox never triggers.
        """
        try:
            return cls(name)
        except ValueError:
            return None

class Task(BaseModel):
    """
    A named command run inside a service's container.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    exec: List[str]

class HookCatalog(BaseModel):
    """
    Resolved hook tasks for one service.

    Known stages are keyed by HookStage. Stages devbox does not know about are
    kept under their configured name in ``extra`` and never run.
    """
    stages: Dict[HookStage, List[Task]] = Field(default_factory=dict)
    extra: Dict[str, List[Task]] = Field(default_factory=dict)

    def for_stage(self, stage: HookStage) -> List[Task]:
        return list(self.stages.get(stage, []))

    def is_empty(self) -> bool:
        return not self.stages and not self.extra
