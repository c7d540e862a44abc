"""
Shared fixtures: an isolated devbox home and a process runner that records
commands instead of spawning them.
"""
import threading
from pathlib import Path
from typing import Callable, Dict, List, NamedTuple, Optional
import pytest
from devbox.errors import SpawnError
from devbox.MODELS.project_config import Settings
from devbox.MANAGERS.project_registry import ProjectRegistry


class Call(NamedTuple):
    command: List[str]
    working_dir: Optional[str]
    env: Optional[Dict[str, str]]
    quiet: bool


class FakeRunner:
    """Records every command; exit codes and spawn failures are scripted per command."""

    def __init__(self):
        self.calls: List[Call] = []
        self.captured_output = ""
        self._exit_codes = []
        self._spawn_failures = []
        self._lock = threading.Lock()

    def fail_when(self, predicate: Callable[[List[str]], bool], exit_code: int = 1):
        self._exit_codes.append((predicate, exit_code))

    def refuse_when(self, predicate: Callable[[List[str]], bool]):
        self._spawn_failures.append(predicate)

    def run(self, command, working_dir=None, env=None, quiet=False):
        with self._lock:
            self.calls.append(Call(list(command), working_dir, env, quiet))
        for predicate in self._spawn_failures:
            if predicate(command):
                raise SpawnError(command, "No such file or directory")
        for predicate, exit_code in self._exit_codes:
            if predicate(command):
                return exit_code
        return 0

    def capture(self, command, working_dir=None, env=None):
        with self._lock:
            self.calls.append(Call(list(command), working_dir, env, False))
        return self.captured_output

    @property
    def commands(self) -> List[List[str]]:
        return [call.command for call in self.calls]


def write_project(home: Path, name: str, config: str, compose: str = "services: {}\n") -> Path:
    project_dir = home / name
    project_dir.mkdir(parents=True, exist_ok=True)
    (project_dir / "config.toml").write_text(config)
    (project_dir / "docker-compose.yml").write_text(compose)
    return project_dir


def write_service(source: Path, config: Optional[str] = None, compose: bool = True) -> Path:
    devbox_dir = source / ".devbox"
    devbox_dir.mkdir(parents=True, exist_ok=True)
    if compose:
        (devbox_dir / "docker-compose.yml").write_text("services: {}\n")
    if config is not None:
        (devbox_dir / "config.toml").write_text(config)
    return source


SERVICE_CONFIG = """
[[tasks]]
name = "migrate"
description = "Run database migrations"
exec = ["bin/rails", "db:migrate"]

[[tasks]]
name = "seed"
description = "Seed the database"
exec = ["bin/rails", "db:seed"]

[[tasks]]
name = "warm"
description = "Warm caches"
exec = ["bin/warm"]

[hooks]
before-build = ["migrate", "seed"]
after-build = ["warm"]
before-update = ["migrate"]
after-update = ["seed"]
"""


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "devbox-home"
    path.mkdir()
    return path


@pytest.fixture
def settings(home):
    return Settings(home=home)


@pytest.fixture
def registry(settings, runner):
    return ProjectRegistry(settings, runner)
