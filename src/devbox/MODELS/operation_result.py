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
Per-item outcomes of best-effort operations.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

class OperationResult(BaseModel):
    """
    Outcome of one hook task, fan-out unit or setup step.
    """
    name: str
    success: bool = True
    reason: Optional[str] = None

    @classmethod
    def ok(cls, name: str) -> "OperationResult":
        return cls(name=name)

    @classmethod
    def failed(cls, name: str, reason: str) -> "OperationResult":
        return cls(name=name, success=False, reason=reason)

class PipelineReport(BaseModel):
    """
    Outcomes of a whole-project pipeline, grouped by stage in execution order.
    """
    stages: Dict[str, List[OperationResult]] = Field(default_factory=dict)

    def add(self, stage: str, results: List[OperationResult]):
        self.stages.setdefault(stage, []).extend(results)

    @property
    def failures(self) -> List[OperationResult]:
        return [r for results in self.stages.values() for r in results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failures
