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
Execution of short-lived external processes.
"""
import subprocess
from typing import Dict, List, Optional
from ..errors import SpawnError

class ProcessRunner:
    """
    Spawns one external process at a time and blocks until it exits.

    A non-zero exit code is returned to the caller, not raised. Only a
    failure to start the process is an error.
    """
    def run(self,
            command: List[str],
            working_dir: Optional[str] = None,
            env: Optional[Dict[str, str]] = None,
            quiet: bool = False) -> int:
        """
        Runs a command with inherited stdin/stdout/stderr.

        Args:
            command (List[str]): Command and arguments to execute.
            working_dir (Optional[str]): Directory to start the process in.
            env (Optional[Dict[str, str]]): Full environment for the process.
            quiet (bool): Discard the process's stdout and stderr.

        Returns:
            int: The exit code of the process.

        Raises:
            SpawnError: If the process could not be started.
        """
        output = subprocess.DEVNULL if quiet else None
        try:
            process = subprocess.Popen(
                command,
                cwd=working_dir,
                env=env,
                stdout=output,
                stderr=output,
                shell=False
            )
        except OSError as e:
            raise SpawnError(command, e.strerror or str(e)) from e
        return process.wait()

    def capture(self,
                command: List[str],
                working_dir: Optional[str] = None,
                env: Optional[Dict[str, str]] = None) -> str:
        """
        Runs a command and returns its standard output.

        Raises:
            SpawnError: If the process could not be started.
        """
        try:
            completed = subprocess.run(
                command,
                cwd=working_dir,
                env=env,
                stdout=subprocess.PIPE,
                text=True,
                shell=False
            )
        except OSError as e:
            raise SpawnError(command, e.strerror or str(e)) from e
        return completed.stdout
