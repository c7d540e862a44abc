"""
Unit tests for compose invocation building.
"""
import os
from pathlib import Path
from devbox.MODELS.project_config import ComposeContext
from devbox.RUNNERS.compose_command import ComposeCommandBuilder


def make_builder():
    context = ComposeContext(project_name="shop", base_overlay=Path("/home/me/.config/devbox/shop/docker-compose.yml"))
    return ComposeCommandBuilder(context)


def test_service_overlay_is_layered_after_base():
    command = make_builder().for_service(Path("/code/api/.devbox/docker-compose.yml"), "up", ["-d", "api"])
    assert command.argv == [
        "docker-compose",
        "-f", "/home/me/.config/devbox/shop/docker-compose.yml",
        "-f", "/code/api/.devbox/docker-compose.yml",
        "--project-directory", "/code/api/.devbox",
        "up", "-d", "api",
    ]


def test_builder_does_not_check_overlay_existence(tmp_path):
    overlay = tmp_path / "missing" / "docker-compose.yml"
    command = make_builder().for_service(overlay, "build", ["api"])
    assert str(overlay) in command.argv


def test_project_invocation_uses_base_only():
    command = make_builder().for_project("down", ["-v", "--remove-orphans"])
    assert command.argv == [
        "docker-compose", "-f", "/home/me/.config/devbox/shop/docker-compose.yml",
        "down", "-v", "--remove-orphans",
    ]


def test_custom_program():
    context = ComposeContext(project_name="shop", base_overlay=Path("/base.yml"))
    command = ComposeCommandBuilder(context, program="podman-compose").for_project("pull")
    assert command.argv[0] == "podman-compose"


def test_environment_carries_project_identity(monkeypatch):
    monkeypatch.delenv("COMPOSE_PROJECT_NAME", raising=False)
    command = make_builder().for_project("pull")
    env = command.environment()
    assert env["COMPOSE_PROJECT_NAME"] == "shop"
    assert env["COMPOSE_FILE"] == "/home/me/.config/devbox/shop/docker-compose.yml"
    assert "COMPOSE_PROJECT_NAME" not in os.environ


def test_two_projects_in_one_process():
    first = ComposeContext(project_name="shop", base_overlay=Path("/shop.yml"))
    second = ComposeContext(project_name="blog", base_overlay=Path("/blog.yml"))
    assert first.environment({})["COMPOSE_PROJECT_NAME"] == "shop"
    assert second.environment({})["COMPOSE_PROJECT_NAME"] == "blog"


def test_program_with_subcommand_is_split():
    context = ComposeContext(project_name="shop", base_overlay=Path("/base.yml"))
    command = ComposeCommandBuilder(context, program="docker compose").for_project("pull")
    assert command.argv[:3] == ["docker", "compose", "-f"]
