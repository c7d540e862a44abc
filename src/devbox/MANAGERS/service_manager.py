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
Lifecycle management for a single service: source checkout, compose
operations and the service's task catalog.
"""
import tomllib
from pathlib import Path
from typing import List, Optional
from ..errors import MissingOverlayFile, NoRepositoryConfigured
from ..MODELS.operation_result import OperationResult
from ..MODELS.project_config import ComposeContext, Settings
from ..MODELS.service_definition import ServiceDefinition
from ..MODELS.task import HookCatalog, HookStage, Task
from ..PARSERS.config_parser import ServiceConfigParser
from ..RUNNERS.compose_command import ComposeCommand, ComposeCommandBuilder
from ..RUNNERS.process_runner import ProcessRunner
from ..UTILS import console, paths
from .hook_runner import HookRunner

class ServiceManager:
    """
    Manages one service of a project.

    Tasks and hooks are unset until :meth:`rehydrate` reads the service's own
    ``.devbox/config.toml``.
    """
    def __init__(self,
                 definition: ServiceDefinition,
                 context: ComposeContext,
                 settings: Optional[Settings] = None,
                 runner: Optional[ProcessRunner] = None):
        """
        Initializes the manager for a service.

        :param definition: The service as declared in the project config.
        :param context: Project identity and base overlay for compose invocations.
        :param settings: Process-level settings.
        :param runner: Runner used for every external process.
        """
        self.definition = definition
        self.context = context
        self.settings = settings or Settings()
        self.runner = runner or ProcessRunner()
        self.compose = ComposeCommandBuilder(context, self.settings.compose_command)
        self.hook_runner = HookRunner(self)

        self.tasks: Optional[List[Task]] = None
        self.hooks: Optional[HookCatalog] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def repo(self) -> Optional[str]:
        return self.definition.repo

    def source_path(self) -> Path:
        """
        Returns the declared ``path``, or ``<project-dir>/src/<name>`` when none is declared.
        """
        if self.definition.path:
            return Path(self.definition.path)
        return paths.default_source_path(self.settings.home, self.definition.project_name, self.name)

    def compose_overlay_path(self) -> Path:
        return self.source_path() / paths.SERVICE_COMPOSE_PATH

    def config_path(self) -> Path:
        return self.source_path() / paths.SERVICE_CONFIG_PATH

    def path_exists(self) -> bool:
        return self.source_path().exists()

    def rehydrate(self):
        """
        Re-reads tasks and hooks from the service-local config.

        A missing or malformed file leaves the service without tasks or hooks.
        """
        self.tasks = None
        self.hooks = None

        config_path = self.config_path()
        if not config_path.is_file():
            console.warn(f"Config file not found, no tasks or hooks are defined for {self.name}")
            return

        with open(config_path, "rb") as f:
            content = f.read().decode("utf-8", errors="replace")

        try:
            config = ServiceConfigParser(self.name).parse_from_string(content)
        except tomllib.TOMLDecodeError as e:
            console.warn(f"Unable to parse {config_path}: {e}")
            return

        self.tasks = config.tasks
        self.hooks = config.hooks

    def start(self) -> int:
        """
        Runs ``up -d <service>`` and waits for it.

        :return: Exit status of the compose process.
        :raises MissingOverlayFile: If the service has no compose overlay.
        """
        return self._run_compose("start", "up", ["-d", self.name])

    def stop(self) -> int:
        return self._run_compose("stop", "stop", [self.name])

    def build(self) -> List[OperationResult]:
        """
        Builds the service's image between its before-build and after-build hooks.

        :return: Results of the hook tasks and of the build itself.
        :raises MissingOverlayFile: If the service has no compose overlay. No hook runs.
        """
        command = self._compose_command("build", "build", [self.name])
        return self.hook_runner.around(
            "build",
            lambda: self._run(command),
            HookStage.BEFORE_BUILD,
            HookStage.AFTER_BUILD,
        )

    def clone_repo(self) -> int:
        """
        Clones the service's repository into its source path.

        An existing checkout is never re-cloned; it is pulled instead.

        :return: Exit status of git.
        :raises NoRepositoryConfigured: If there is nothing to clone from.
        """
        if self.path_exists():
            console.warn(f"{self.name} already exists, fetching updates...")
            return self.update_repo()

        # A declared path is authoritative; repo is only cloned into the default location.
        if self.definition.path or not self.repo:
            raise NoRepositoryConfigured(self.name)

        command = [self.settings.git_command, "clone", self.repo, str(self.source_path())]
        return self.runner.run(command)

    def update(self) -> List[OperationResult]:
        """
        Pulls the latest source between the before-update and after-update hooks.
        Clones instead when there is no checkout yet.

        :return: Results of the hook tasks and of the pull or clone.
        """
        if not self.path_exists():
            exit_code = self.clone_repo()
            if exit_code:
                return [OperationResult.failed("clone", f"exit status {exit_code}")]
            return [OperationResult.ok("clone")]

        return self.hook_runner.around(
            "pull",
            self.update_repo,
            HookStage.BEFORE_UPDATE,
            HookStage.AFTER_UPDATE,
        )

    def update_repo(self) -> int:
        command = [self.settings.git_command, "pull", self.settings.git_remote, self.settings.git_branch]
        return self.runner.run(command, working_dir=str(self.source_path()))

    def task_list(self) -> List[Task]:
        return list(self.tasks or [])

    def hook_tasks(self, stage: HookStage) -> List[Task]:
        if self.hooks is None:
            return []
        return self.hooks.for_stage(stage)

    def find_task(self, name: str) -> Optional[Task]:
        for task in self.task_list():
            if task.name == name:
                return task
        return None

    def list_tasks(self):
        """
        Prints the service's task catalog.
        """
        console.print_table(
            ("TASK", "DESCRIPTION"),
            [(task.name, task.description) for task in self.task_list()],
        )

    def exec_tasks(self, task_names: List[str]) -> List[OperationResult]:
        """
        Executes tasks in the running container, in the order given.

        Unknown task names are reported and skipped.

        :param task_names: Names of tasks from the catalog.
        :return: One result per requested name.
        :raises MissingOverlayFile: If the service has no compose overlay.
        """
        results = []
        for name in task_names:
            task = self.find_task(name)
            if task is None:
                console.warn(f"Task '{name}' could not be found for service {self.name}")
                results.append(OperationResult.failed(name, "unknown task"))
                continue
            exit_code = self.exec_task(task)
            if exit_code:
                results.append(OperationResult.failed(name, f"exit status {exit_code}"))
            else:
                results.append(OperationResult.ok(name))
        return results

    def exec_task(self, task: Task) -> int:
        """
        Runs a task inside the already running container with ``exec``.
        """
        return self._run_compose("execute", "exec", [self.name, *task.exec])

    def run_task(self, task: Task) -> int:
        """
        Runs a task in a throwaway container with ``run --rm``. Used for hooks.
        """
        return self._run_compose("execute", "run", ["--rm", self.name, *task.exec])

    def _compose_command(self, action: str, subcommand: str, args: List[str]) -> ComposeCommand:
        overlay = self.compose_overlay_path()
        if not overlay.exists():
            raise MissingOverlayFile(self.name, action)
        return self.compose.for_service(overlay, subcommand, args)

    def _run_compose(self, action: str, subcommand: str, args: List[str]) -> int:
        return self._run(self._compose_command(action, subcommand, args))

    def _run(self, command: ComposeCommand) -> int:
        return self.runner.run(command.argv, env=command.environment())

    def __repr__(self):
        return f"ServiceManager({self.name!r}, source={str(self.source_path())!r})"
