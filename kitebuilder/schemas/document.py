"""
PipelineDocument schema - the root of a built pipeline.

The document is what the DSL accumulates into and what the serializer turns
into the wire format:

    steps:  ordered list of Step (declaration order, never reordered)
    env:    pipeline-level environment (str -> str), emitted only if non-empty
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from .steps import Step


@dataclass
class PipelineDocument:
    """
    The in-memory pipeline a build produces.

    Attributes:
        steps: Steps in declaration order
        env: Pipeline-level environment variables
    """
    steps: list[Step] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)

    def add(self, step: Step) -> Step:
        """Append a step at the end of the document and return it."""
        self.steps.append(step)
        return step

    def merge_env(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> dict[str, str]:
        """
        Merge environment variables into the document.

        Later values overwrite earlier ones for the same key. Keys and values
        are stored as strings.

        Returns:
            The merged environment
        """
        for source in (values or {}, kwargs):
            for key, value in source.items():
                self.env[str(key)] = str(value)
        return self.env
