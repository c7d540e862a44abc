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
Orchestration of project-wide and single-service operations.
"""
from typing import Callable, List, Optional, Tuple
from ..errors import DevboxError
from ..MODELS.operation_result import OperationResult, PipelineReport
from ..MODELS.project_config import Settings
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS import console
from .environment_manager import EnvironmentManager
from .fan_out import FanOut
from .project_registry import Project
from .service_manager import ServiceManager

PipelineStep = Tuple[str, Callable[[], List[OperationResult]]]

class ProjectOrchestrator:
    """
    Entry point for the devbox operations of one project.

    Operations given a service name act on that service alone and raise on
    failure. Without a service name they act on the whole project, where
    failures of individual steps or services are reported and recorded
    instead of raised.
    """
    def __init__(self,
                 project: Project,
                 settings: Optional[Settings] = None,
                 runner: Optional[ProcessRunner] = None):
        """
        Initializes the orchestrator.

        :param project: The loaded project.
        :param settings: Process-level settings.
        :param runner: Runner used for project-wide external processes.
        """
        self.project = project
        self.settings = settings or Settings()
        self.runner = runner or ProcessRunner()
        self.environment = EnvironmentManager(project.context, self.settings, self.runner)
        self.fan_out = FanOut(self.settings.max_workers)

        # Environment setup precedes cloning and building of services.
        self.build_pipeline: List[PipelineStep] = [
            ("network", self._step("network", self.environment.create_network)),
            ("volumes", self.create_volumes),
            ("pull", self._step("pull", self.environment.pull_images)),
            ("images", self._step("images", self.environment.build_images)),
            ("clone", self.clone_services),
            ("build", self.build_services),
        ]

    def start(self, service_name: Optional[str] = None) -> int:
        if service_name:
            return self.project.find_service(service_name).start()
        return self.environment.start_all()

    def stop(self, service_name: Optional[str] = None) -> PipelineReport:
        """
        Stops one service, or tears down the whole environment and removes dangling images.
        """
        report = PipelineReport()
        if service_name:
            exit_code = self.project.find_service(service_name).stop()
            report.add("stop", [self._result(service_name, exit_code)])
            return report

        report.add("down", self._step("down", self.environment.destroy_environment)())
        report.add("images", self._step("remove-images", self.environment.remove_dangling_images)())
        return report

    def build(self, service_name: Optional[str] = None) -> PipelineReport:
        """
        Builds one service, or runs the whole-project build pipeline.

        A single service is cloned (or pulled when already checked out) on a
        best-effort basis before it is built.
        """
        if not service_name:
            return self.build_all()

        service = self.project.find_service(service_name)
        report = PipelineReport()
        report.add("clone", self._step(service.name, service.clone_repo)())
        report.add("build", service.build())
        return report

    def build_all(self) -> PipelineReport:
        """
        Runs every step of ``build_pipeline`` in order. Nothing is rolled back
        when a step fails.
        """
        report = PipelineReport()
        for stage, step in self.build_pipeline:
            report.add(stage, step())

        if report.failures:
            console.warn(f"{len(report.failures)} step(s) failed while building {self.project.name}")
        return report

    def update(self, service_name: str) -> List[OperationResult]:
        return self.project.find_service(service_name).update()

    def clone_services(self) -> List[OperationResult]:
        return self.fan_out.map(self._clone_service, self.project.services, _service_name)

    def build_services(self) -> List[OperationResult]:
        return self.fan_out.map(self._build_service, self.project.services, _service_name)

    def create_volumes(self) -> List[OperationResult]:
        console.info("Creating volumes")
        return self.fan_out.map(self._create_volume, self.project.volumes)

    def list_tasks(self, service_name: str):
        self.project.find_service(service_name).list_tasks()

    def exec_tasks(self, service_name: str, task_names: List[str]) -> List[OperationResult]:
        return self.project.find_service(service_name).exec_tasks(task_names)

    def _clone_service(self, service: ServiceManager):
        exit_code = service.clone_repo()
        if exit_code:
            raise DevboxError(f"git exited with status {exit_code}")

    def _build_service(self, service: ServiceManager):
        service.rehydrate()
        failed = [r for r in service.build() if not r.success]
        if failed:
            raise DevboxError(", ".join(f"{r.name} ({r.reason})" for r in failed))

    def _create_volume(self, name: str):
        exit_code = self.environment.create_volume(name)
        if exit_code:
            raise DevboxError(f"docker volume create exited with status {exit_code}")

    def _step(self, name: str, operation: Callable[[], int]) -> Callable[[], List[OperationResult]]:
        """
        Wraps a single best-effort operation so it yields one result instead of raising.
        """
        def run() -> List[OperationResult]:
            try:
                exit_code = operation()
            except DevboxError as e:
                console.warn(f"{name}: {e}")
                return [OperationResult.failed(name, str(e))]
            return [self._result(name, exit_code)]
        return run

    @staticmethod
    def _result(name: str, exit_code: int) -> OperationResult:
        if exit_code:
            return OperationResult.failed(name, f"exit status {exit_code}")
        return OperationResult.ok(name)

def _service_name(service: ServiceManager) -> str:
    return service.name
