"""
Definition validation.

Two shapes are recognized:
- PipelineDefinition / PipelineDocument at the root
- Step (one of the six kinds) at the leaves

Loaders and the DSL validate each object as it is constructed, and the
pipeline validates the whole document once more before serializing. The first
violation raises; nothing is serialized or uploaded after it.
"""

from collections.abc import Mapping
from typing import Any, Optional

from kitebuilder.definition import PipelineDefinition, TemplateDefinition
from kitebuilder.errors import PipelineValidationError, TemplateValidationError
from kitebuilder.schemas import PipelineDocument, Step, STEP_TYPES


def _where(source: Optional[str]) -> str:
    return f"{source} " if source else ""


def validate_pipeline_definition(obj: Any, source: Optional[str] = None) -> PipelineDefinition:
    """
    Check that a pipeline file exported a PipelineDefinition.

    Raises:
        PipelineValidationError: If obj is anything else
    """
    if not isinstance(obj, PipelineDefinition):
        raise PipelineValidationError(
            f"{_where(source)}must be a valid definition (PipelineDefinition), "
            f"got {type(obj).__name__}"
        )
    return obj


def validate_template_definition(obj: Any, source: Optional[str] = None) -> TemplateDefinition:
    """
    Check that a template file exported a TemplateDefinition.

    Raises:
        TemplateValidationError: If obj is anything else
    """
    if not isinstance(obj, TemplateDefinition):
        raise TemplateValidationError(
            f"{_where(source)}must be a valid definition (TemplateDefinition), "
            f"got {type(obj).__name__}"
        )
    return obj


def validate_step_kind(obj: Any, source: Optional[str] = None) -> Step:
    """
    Check that obj is a step of a recognized kind.

    Raises:
        TemplateValidationError: If obj is not one of the six step kinds
    """
    if type(obj) not in STEP_TYPES.values():
        raise TemplateValidationError(
            f"{_where(source)}must be a valid definition (Step: "
            f"{', '.join(STEP_TYPES)}), got {type(obj).__name__}"
        )
    return obj


def validate_step(obj: Any, source: Optional[str] = None) -> Step:
    """
    Check that obj is a complete step of a recognized kind.

    Raises:
        TemplateValidationError: If obj is not one of the six step kinds, or
            its kind's primary attribute is unset
    """
    step = validate_step_kind(obj, source)
    if step.primary is not None and step.get(step.primary) in (None, []):
        raise TemplateValidationError(
            f"{_where(source)}must be a valid definition (Step): a {step.kind} step "
            f"requires '{step.primary}'"
        )
    return step


def validate_document(document: Any) -> PipelineDocument:
    """
    Validate a whole document before serialization.

    Raises:
        PipelineValidationError: If the root has no steps list or env is not a mapping
        TemplateValidationError: If any step is invalid
    """
    steps = getattr(document, "steps", None)
    if not isinstance(document, PipelineDocument) or not isinstance(steps, list):
        raise PipelineValidationError(
            f"pipeline must be a valid definition (PipelineDocument with a steps list), "
            f"got {type(document).__name__}"
        )
    if not isinstance(document.env, Mapping):
        raise PipelineValidationError(
            f"pipeline env must be a mapping, got {type(document.env).__name__}"
        )

    for index, step in enumerate(steps):
        validate_step(step, source=f"steps[{index}]")

    return document
