import random
import string
import tomllib
import pytest
from devbox.errors import ConfigInvalid
from devbox.PARSERS.config_parser import ProjectConfigParser, ServiceConfigParser

def random_string(length):
    return ''.join(random.choice(string.printable) for _ in range(length))

def test_fuzz_project_parser(tmp_path):
    parser = ProjectConfigParser()
    path = tmp_path / "config.toml"
    for _ in range(100):
        path.write_text(random_string(random.randint(0, 500)))
        try:
            parser.parse(path, "fuzz")
        except ConfigInvalid:
            pass

def test_fuzz_service_parser():
    parser = ServiceConfigParser("fuzz")
    for _ in range(100):
        try:
            parser.parse_from_string(random_string(random.randint(0, 500)))
        except tomllib.TOMLDecodeError:
            pass

@pytest.mark.parametrize("content", [
    'tasks = 5',
    'tasks = [1, 2]',
    'hooks = { before-build = "migrate" }',
    'hooks = { before-build = [1] }',
    '[[tasks]]\nname = "a"\nexec = "not-a-list"',
])
def test_wrongly_typed_service_config_degrades(content):
    config = ServiceConfigParser("fuzz").parse_from_string(content)
    assert config.tasks is None
