from dataclasses import dataclass
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASIC_YAML = """\
---
steps:
- label: Basic step
  command:
  - 'true'
"""


def fixture_project_path(project: str) -> Path:
    return FIXTURES_DIR / project


def fixture_pipeline_path(project: str, pipeline: str = "dummy") -> Path:
    return FIXTURES_DIR / project / ".buildkite" / "pipelines" / pipeline


@dataclass
class AgentCall:
    operation: str
    subcommand: str
    path: str
    contents: bytes


class RecordingAgent:
    """Agent double that records each call and the file contents at call time."""

    def __init__(self, fail_on: str | None = None, result=None):
        self.calls: list[AgentCall] = []
        self.fail_on = fail_on
        self.result = result

    def artifact(self, subcommand, path):
        return self._record("artifact", subcommand, path)

    def pipeline(self, subcommand, path):
        return self._record("pipeline", subcommand, path)

    def _record(self, operation, subcommand, path):
        self.calls.append(AgentCall(operation, subcommand, path, Path(path).read_bytes()))
        if self.fail_on == operation:
            raise RuntimeError(f"{operation} upload exploded")
        return self.result

    def of(self, operation: str) -> list[AgentCall]:
        return [c for c in self.calls if c.operation == operation]


@pytest.fixture
def agent():
    return RecordingAgent()


@pytest.fixture
def basic_path():
    return fixture_pipeline_path("basic")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("KITEBUILDER_AGENT", "KITEBUILDER_LOG_LEVEL", "BUILDKITE_PIPELINE_SLUG"):
        monkeypatch.delenv(var, raising=False)
