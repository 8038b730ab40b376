"""
kitebuilder.schemas - Data structures for a built pipeline.

PipelineDocument -> Step (CommandStep | TriggerStep | WaitStep | BlockStep | InputStep | SkipStep)

The DSL fills a PipelineDocument with steps; the serializer turns it into the
wire mapping uploaded to the agent.
"""

from .steps import (
    Step,
    CommandStep,
    TriggerStep,
    WaitStep,
    BlockStep,
    InputStep,
    SkipStep,
    STEP_TYPES,
    step_for_kind,
)
from .document import PipelineDocument

__all__ = [
    # Steps
    "Step",
    "CommandStep",
    "TriggerStep",
    "WaitStep",
    "BlockStep",
    "InputStep",
    "SkipStep",
    "STEP_TYPES",
    "step_for_kind",
    # Document
    "PipelineDocument",
]
