"""
Whole-project pipelines driven through ProjectOrchestrator.
"""
import pytest
from devbox.errors import MissingOverlayFile
from devbox.MANAGERS.project_orchestrator import ProjectOrchestrator
from conftest import SERVICE_CONFIG, write_project, write_service


@pytest.fixture
def project(registry, home, tmp_path):
    api = write_service(tmp_path / "code" / "api", SERVICE_CONFIG)
    web = write_service(tmp_path / "code" / "web")
    write_project(home, "shop", f"""
volumes = ["pg", "redis"]

[[services]]
name = "api"
path = "{api}"

[[services]]
name = "web"
path = "{web}"

[[services]]
name = "worker"
repo = "https://example.com/worker.git"
""")
    return registry.load("shop")


@pytest.fixture
def orchestrator(project, settings, runner):
    return ProjectOrchestrator(project, settings, runner)


def index_of(commands, predicate):
    return next(i for i, c in enumerate(commands) if predicate(c))


def test_build_all_pipeline_order(orchestrator, runner):
    report = orchestrator.build()

    assert list(report.stages) == ["network", "volumes", "pull", "images", "clone", "build"]
    commands = runner.commands
    network = index_of(commands, lambda c: c[:3] == ["docker", "network", "create"])
    volumes = [i for i, c in enumerate(commands) if c[:3] == ["docker", "volume", "create"]]
    pull = index_of(commands, lambda c: c[-1] == "pull")
    clone = index_of(commands, lambda c: c[:2] == ["git", "clone"])
    builds = [i for i, c in enumerate(commands) if c[-2:-1] == ["build"]]
    assert network < min(volumes) and max(volumes) < pull < clone < min(builds)


def test_build_all_records_partial_failures(orchestrator, runner):
    report = orchestrator.build()

    clone = {r.name: r for r in report.stages["clone"]}
    build = {r.name: r for r in report.stages["build"]}
    # api and web are pulled in place; worker is cloned into the project directory.
    assert clone["api"].success and clone["web"].success and clone["worker"].success
    # worker has no overlay because the fake clone did not create one.
    assert not build["worker"].success
    assert "missing docker-compose file" in build["worker"].reason
    assert build["api"].success and build["web"].success
    assert [f.name for f in report.failures] == ["worker"]


def test_build_all_runs_hooks(orchestrator, runner):
    orchestrator.build()
    hook_runs = [c for c in runner.commands if "run" in c and "--rm" in c]
    assert [c[-1] for c in hook_runs] == ["db:migrate", "db:seed", "bin/warm"]


def test_failing_service_does_not_block_siblings(orchestrator, runner):
    runner.fail_when(lambda c: c[-2:] == ["build", "api"])
    report = orchestrator.build()

    built = [c[-1] for c in runner.commands if c[-2:-1] == ["build"]]
    assert sorted(built) == ["api", "web"]
    assert {f.name for f in report.failures} == {"api", "worker"}


def test_volume_failure_is_isolated(orchestrator, runner):
    runner.refuse_when(lambda c: c[-1] == "pg")
    results = orchestrator.create_volumes()
    assert [(r.name, r.success) for r in results] == [("pg", False), ("redis", True)]


def test_missing_docker_does_not_abort_pipeline(orchestrator, runner):
    runner.refuse_when(lambda c: c[0] == "docker")
    report = orchestrator.build()
    assert not report.stages["network"][0].success
    assert report.stages["images"][0].success


def test_single_service_build(orchestrator, runner):
    report = orchestrator.build("web")
    assert runner.commands[0] == ["git", "pull", "origin", "master"]
    assert runner.commands[-1][-2:] == ["build", "web"]
    assert report.success


def test_single_service_build_missing_overlay(orchestrator, runner):
    with pytest.raises(MissingOverlayFile) as excinfo:
        orchestrator.build("worker")
    assert excinfo.value.service == "worker"
    assert not any(c[-2:-1] == ["build"] for c in runner.commands)


def test_start_and_stop_whole_project(orchestrator, runner):
    orchestrator.start()
    report = orchestrator.stop()
    assert runner.commands[0][-2:] == ["up", "-d"]
    assert runner.commands[1][-3:] == ["down", "-v", "--remove-orphans"]
    assert runner.commands[2] == ["docker", "images", "-q", "-f", "dangling=true"]
    assert report.success


def test_start_single_service(orchestrator, runner):
    orchestrator.start("web")
    assert len(runner.commands) == 1
    assert runner.commands[0][-3:] == ["up", "-d", "web"]


def test_update_single_service(orchestrator, runner):
    results = orchestrator.update("api")
    assert [r.name for r in results] == ["before-update:migrate", "pull", "after-update:seed"]
