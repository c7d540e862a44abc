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
Marked terminal messages and task tables.
"""
from typing import Iterable, Tuple
import click

def info(message: str):
    click.echo(f"{click.style('INFO', fg='green')} {message}")

def warn(message: str):
    """
    Reports a best-effort failure. Never raises.
    """
    click.echo(f"{click.style('WARN', fg='yellow')} {message}", err=True)

def error(message: str):
    click.echo(click.style(message, fg="red"), err=True)

def print_table(header: Tuple[str, str], rows: Iterable[Tuple[str, str]]):
    """
    Prints a two-column table, sizing the first column to its widest cell.

    :param header: Column titles.
    :param rows: (first, second) cell pairs.
    """
    rows = list(rows)
    width = max([len(header[0])] + [len(first) for first, _ in rows])
    click.echo(f"{header[0]:{width}}  {header[1]}")
    for first, second in rows:
        click.echo(f"{first:{width}}  {second}")
