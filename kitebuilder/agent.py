"""
Agent - the upload interface to the CI backend.

The pipeline calls two blocking operations, each with a subcommand and a path:

    agent.artifact("upload", path)   -> buildkite-agent artifact upload <path>
    agent.pipeline("upload", path)   -> buildkite-agent pipeline upload <path>

AgentCommand runs the real agent CLI. Anything with the same two methods can be
passed to Pipeline(agent=...) instead (tests use a recording fake).
"""

import logging
import subprocess
from pathlib import Path
from typing import Any, Protocol

from kitebuilder.errors import UploadError

logger = logging.getLogger(__name__)


class Agent(Protocol):
    """Upload interface expected by Pipeline.upload()."""

    def artifact(self, subcommand: str, *args: Any) -> Any:
        ...

    def pipeline(self, subcommand: str, *args: Any) -> Any:
        ...


class AgentCommand:
    """
    Runs buildkite-agent subcommands.

    Usage:
        agent = AgentCommand()
        agent.artifact("upload", "/tmp/pipeline.yml")
        agent.pipeline("upload", "/tmp/pipeline.yml")
    """

    def __init__(self, executable: str = "buildkite-agent"):
        """
        Args:
            executable: Agent binary name or path
        """
        self.executable = executable

    def artifact(self, subcommand: str, *args: Any) -> subprocess.CompletedProcess:
        return self.run("artifact", subcommand, *args)

    def pipeline(self, subcommand: str, *args: Any) -> subprocess.CompletedProcess:
        return self.run("pipeline", subcommand, *args)

    def run(self, *args: Any) -> subprocess.CompletedProcess:
        """
        Run the agent with the given arguments.

        Raises:
            UploadError: If the agent is missing or exits non-zero
        """
        command = [self.executable, *(str(a) if isinstance(a, Path) else a for a in args)]
        logger.debug(f"Executing: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,  # Don't raise, we'll handle errors
            )
        except FileNotFoundError as e:
            raise UploadError(f"Agent executable not found: {self.executable}") from e

        if result.returncode != 0:
            error_msg = f"{' '.join(command[1:3])} failed with exit code {result.returncode}"
            if result.stderr:
                error_msg += f": {result.stderr.strip()[:500]}"

            logger.error(
                error_msg,
                extra={
                    "event": "agent_error",
                    "metadata": {
                        "command": command,
                        "exit_code": result.returncode,
                    },
                },
            )
            raise UploadError(error_msg)

        # Log stdout at debug level
        if result.stdout:
            logger.debug(f"Agent output: {result.stdout[:500]}")

        return result
