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
Command Line Interface for devbox.
"""
import functools
import click
from dotenv import load_dotenv
from ..errors import DevboxError, error_chain
from ..MANAGERS.project_orchestrator import ProjectOrchestrator
from ..MANAGERS.project_registry import ProjectRegistry
from ..MODELS.project_config import Settings
from ..UTILS import console

def handle_errors(command):
    """
    Prints a devbox failure with its chain of causes and exits with status 1.
    """
    @functools.wraps(command)
    def wrapper(*args, **kwargs):
        try:
            return command(*args, **kwargs)
        except DevboxError as e:
            console.error("ERROR:")
            for message in error_chain(e):
                console.error(message)
            click.get_current_context().exit(1)
    return wrapper

def _orchestrator(ctx) -> ProjectOrchestrator:
    """
    Loads the project named on the command line.
    """
    settings = ctx.obj.get('settings') or Settings.from_env()
    runner = ctx.obj.get('runner')
    project = ProjectRegistry(settings, runner).load(ctx.obj['project'])
    return ProjectOrchestrator(project, settings, runner)

@click.group()
@click.option('--project', '-p', envvar='DEVBOX_PROJECT', required=True, help='Project name')
@click.pass_context
def cli(ctx, project):
    """
    Devbox - control your local infrastructure and services.
    """
    ctx.ensure_object(dict)
    ctx.obj['project'] = project

@cli.command()
@click.argument('service', required=False)
@click.pass_context
@handle_errors
def start(ctx, service):
    """Start infrastructure or service"""
    _orchestrator(ctx).start(service)

@cli.command()
@click.argument('service', required=False)
@click.pass_context
@handle_errors
def stop(ctx, service):
    """Stop infrastructure or service"""
    _orchestrator(ctx).stop(service)

@cli.command()
@click.argument('service', required=False)
@click.pass_context
@handle_errors
def build(ctx, service):
    """Build infrastructure"""
    _orchestrator(ctx).build(service)

@cli.command()
@click.argument('service')
@click.pass_context
@handle_errors
def update(ctx, service):
    """Update a service"""
    _orchestrator(ctx).update(service)

@cli.group()
def tasks():
    """List and execute tasks for a service"""

@tasks.command('list')
@click.argument('service')
@click.pass_context
@handle_errors
def list_tasks(ctx, service):
    """List tasks for a service"""
    _orchestrator(ctx).list_tasks(service)

@tasks.command('exec')
@click.argument('service')
@click.argument('task_names', metavar='TASKS', nargs=-1, required=True)
@click.pass_context
@handle_errors
def exec_tasks(ctx, service, task_names):
    """Execute tasks for a service"""
    _orchestrator(ctx).exec_tasks(service, list(task_names))

def main():
    """
    Main entry point for the CLI.
    """
    load_dotenv()
    cli(obj={})

if __name__ == '__main__':
    main()
