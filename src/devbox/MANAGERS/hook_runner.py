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
Hook sequencing around a service's primary lifecycle operations.
"""
from typing import Callable, List, Optional
from ..errors import DevboxError
from ..MODELS.operation_result import OperationResult
from ..MODELS.task import HookStage
from ..UTILS import console

class HookRunner:
    """
    Runs a service's hook tasks before and after a primary operation.

    Hook tasks are best-effort: a failing task is reported and the remaining
    tasks, the primary operation and the following stage still run.
    """
    def __init__(self, service):
        """
        :param service: The ServiceManager whose hooks are run.
        """
        self.service = service

    def run_stage(self, stage: HookStage) -> List[OperationResult]:
        """
        Runs every task of a stage in declared order.

        :param stage: The lifecycle stage to run.
        :return: One result per task.
        """
        console.info(f"Running {stage.value} hooks")
        results = []
        for task in self.service.hook_tasks(stage):
            label = f"{stage.value}:{task.name}"
            try:
                exit_code = self.service.run_task(task)
            except DevboxError as e:
                console.warn(f"Hook task `{task.name}` for {self.service.name} failed: {e}")
                results.append(OperationResult.failed(label, str(e)))
                continue
            if exit_code != 0:
                console.warn(f"Hook task `{task.name}` for {self.service.name} exited with status {exit_code}")
                results.append(OperationResult.failed(label, f"exit status {exit_code}"))
            else:
                results.append(OperationResult.ok(label))
        return results

    def around(self,
               name: str,
               primary: Callable[[], Optional[int]],
               before: HookStage,
               after: HookStage) -> List[OperationResult]:
        """
        Runs ``before`` hooks, then ``primary``, then ``after`` hooks.

        The after stage runs whatever exit status the primary operation had.
        A primary operation that cannot be spawned raises and skips it.

        :param name: Label for the primary operation's result.
        :param primary: Callable returning the exit status of its external process.
        :param before: Stage run before ``primary``.
        :param after: Stage run after ``primary``.
        :return: Results of every hook task and of the primary operation, in execution order.
        """
        results = self.run_stage(before)

        exit_code = primary()
        if exit_code:
            results.append(OperationResult.failed(name, f"exit status {exit_code}"))
        else:
            results.append(OperationResult.ok(name))

        results.extend(self.run_stage(after))
        return results
