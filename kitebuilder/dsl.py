"""
Dsl - the declaration context a pipeline definition runs against.

Every step method creates a step of its kind and applies its arguments in
order. The finished step is validated and appended to the document at the
point of the call; a declaration that raises leaves the document unchanged.

    positional   template names, TemplateDefinitions, or callables taking the step
    keyword      attributes set directly (if_ -> if, async_ -> async)

    @kitebuilder.pipeline
    def pipeline(dsl):
        dsl.env(RAILS_ENV="test")
        dsl.command("rspec")                                  # templates/rspec.py
        dsl.command(lambda step: step.command("make lint"), label="Lint")
        dsl.wait(continue_on_failure=True)
        dsl.trigger(trigger="deploy", branches="main")

Steps are never reordered or removed once declared.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from kitebuilder.definition import TemplateDefinition
from kitebuilder.errors import TemplateValidationError
from kitebuilder.loaders.templates import TemplateLibrary
from kitebuilder.schemas import (
    BlockStep,
    CommandStep,
    InputStep,
    PipelineDocument,
    SkipStep,
    Step,
    TriggerStep,
    WaitStep,
    step_for_kind,
)
from kitebuilder.validation import validate_step, validate_step_kind

logger = logging.getLogger(__name__)

StepDefinition = Union[str, TemplateDefinition, Callable[[Step], Any]]


class Dsl:
    """
    Declaration context for one build.

    Args:
        document: Document the steps and env are declared into
        templates: Library used to resolve template names
    """

    def __init__(self, document: PipelineDocument, templates: TemplateLibrary):
        self.document = document
        self.templates = templates

    def command(self, *definitions: StepDefinition, **attributes: Any) -> CommandStep:
        return self._declare("command", definitions, attributes)

    def trigger(self, *definitions: StepDefinition, **attributes: Any) -> TriggerStep:
        return self._declare("trigger", definitions, attributes)

    def wait(self, *definitions: StepDefinition, **attributes: Any) -> WaitStep:
        return self._declare("wait", definitions, attributes)

    def block(self, *definitions: StepDefinition, **attributes: Any) -> BlockStep:
        return self._declare("block", definitions, attributes)

    def input(self, *definitions: StepDefinition, **attributes: Any) -> InputStep:
        return self._declare("input", definitions, attributes)

    def skip(self, *definitions: StepDefinition, **attributes: Any) -> SkipStep:
        return self._declare("skip", definitions, attributes)

    def env(self, values: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> dict[str, str]:
        """Merge pipeline-level environment variables. Later keys win."""
        return self.document.merge_env(values, **kwargs)

    def _declare(self, kind: str, definitions: tuple, attributes: dict[str, Any]) -> Any:
        step = step_for_kind(kind)
        position = len(self.document.steps)

        for definition in definitions:
            self._apply(step, definition, position)
        for name, value in attributes.items():
            step.set(name, value)
        validate_step(step, source=f"{kind} step #{position}")

        # Only complete steps join the document
        self.document.add(step)
        logger.debug(f"Declared {kind} step #{position}: {step.label_text}")
        return step

    def _apply(self, step: Step, definition: StepDefinition, position: int) -> None:
        if isinstance(definition, str):
            definition = self.templates.get(definition)

        if isinstance(definition, TemplateDefinition):
            name = definition.name or "template"
            result = definition.apply(step)
        elif callable(definition):
            name = getattr(definition, "__name__", "callback")
            result = definition(step)
        else:
            raise TemplateValidationError(
                f"{step.kind} step #{position}: expected a template name, TemplateDefinition "
                f"or callable, got {type(definition).__name__}"
            )

        # Callbacks mutate the step they are given; they may return it for chaining
        if result is None or result is step:
            return
        validate_step_kind(result, source=f"{step.kind} step #{position} ({name})")
        raise TemplateValidationError(
            f"{step.kind} step #{position} ({name}) must be a valid definition (Step): "
            f"callbacks must modify the step they are given, not return a new one"
        )
