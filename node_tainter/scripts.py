"""Execution of health-check scripts."""

import contextlib
import os
import signal
import subprocess
from collections.abc import Sequence
from pathlib import Path

from node_tainter.exceptions import (
    ScriptExecutionError,
    ScriptNotFoundError,
    ScriptTimeoutError,
)
from node_tainter.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SCRIPT_TIMEOUT = 10.0


class ScriptRunner:
    """Runs health-check scripts, each under its own timeout."""

    def __init__(self, timeout: float = DEFAULT_SCRIPT_TIMEOUT, log_output: bool = False):
        """Initialize the runner.

        Args:
            timeout: Seconds a single script may run before it is killed
            log_output: If True, log each script's combined output at INFO
        """
        self.timeout = timeout
        self.log_output = log_output

    def run(self, script_path: str) -> str:
        """
        Run one script and return its combined stdout and stderr.

        Returns:
            Captured output of the script.

        Raises:
            ScriptNotFoundError: If the script does not exist or cannot be executed.
            ScriptTimeoutError: If the script ran longer than the timeout.
            ScriptExecutionError: If the script exited with a non-zero status.
        """
        logger.debug(f"Running health-check script: {script_path}")

        try:
            # Own session so a timeout kills the script's children too
            proc = subprocess.Popen(
                [script_path],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                # Only the exit status matters; undecodable output must not fail the run
                errors="replace",
                start_new_session=True,
            )
        except FileNotFoundError as e:
            logger.error(f"Script not found: {script_path}")
            raise ScriptNotFoundError(
                f"Script not found: {script_path}",
                f"Expected location: {Path(script_path).absolute()}",
                script_path=script_path,
            ) from e
        except PermissionError as e:
            logger.error(f"Script is not executable: {script_path}")
            raise ScriptNotFoundError(
                f"Script is not executable: {script_path}",
                f"Make it executable with: chmod +x {script_path}",
                script_path=script_path,
            ) from e
        except OSError as e:
            logger.error(f"Script cannot be executed: {script_path}: {e}")
            raise ScriptNotFoundError(
                f"Script cannot be executed: {script_path}",
                f"{e}\n\nCheck that the script starts with a shebang line, e.g. #!/bin/sh",
                script_path=script_path,
            ) from e

        with proc:
            try:
                output, _ = proc.communicate(timeout=self.timeout)
            except subprocess.TimeoutExpired as e:
                with contextlib.suppress(ProcessLookupError):
                    os.killpg(proc.pid, signal.SIGKILL)
                proc.communicate()
                logger.warning(f"Script {script_path} timed out after {self.timeout} seconds")
                raise ScriptTimeoutError(
                    f"Script timed out: {script_path}",
                    f"The script did not finish within {self.timeout} seconds and was killed.",
                    script_path=script_path,
                ) from e

        output = output or ""
        if self.log_output:
            logger.info(f"{script_path} output:")
            logger.info(output)

        if proc.returncode != 0:
            logger.info(f"Script {script_path} failed with exit code {proc.returncode}")
            raise ScriptExecutionError(
                f"Script failed with exit code {proc.returncode}: {script_path}",
                output.strip() or None,
                script_path=script_path,
                returncode=proc.returncode,
                output=output,
            )

        logger.debug(f"Script {script_path} succeeded")
        return output

    def execute_scripts(self, script_paths: Sequence[str]) -> list[str]:
        """
        Run scripts in order, stopping at the first failure.

        Scripts that ran before the failing one are not rolled back.

        Returns:
            Outputs of all scripts, in order.

        Raises:
            ScriptError: The error of the first script that failed.
        """
        outputs = []
        for path in script_paths:
            outputs.append(self.run(path))
        return outputs
