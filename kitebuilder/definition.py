"""
Definitions - wrappers for user-supplied build callbacks.

A pipeline file exports a PipelineDefinition:

    import kitebuilder

    @kitebuilder.pipeline
    def pipeline(dsl):
        dsl.command("basic")

A template file exports a TemplateDefinition, applied to a step builder:

    @kitebuilder.template
    def template(step):
        step.label("Basic step")
        step.command("true")

The loaders only accept these two types; anything else is rejected by
kitebuilder.validation.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class PipelineDefinition:
    """
    The root build callback of a pipeline.

    Attributes:
        callback: Called once with the build's Dsl
        name: Name used in error messages (defaults to the callback's name)
    """
    callback: Callable[[Any], Any]
    name: Optional[str] = None

    def evaluate(self, dsl: Any) -> None:
        """Run the callback against the DSL."""
        self.callback(dsl)


@dataclass(frozen=True)
class TemplateDefinition:
    """
    A reusable step callback.

    Attributes:
        callback: Called with a step builder; mutates it in place
        name: Template name used in error messages
    """
    callback: Callable[[Any], Any]
    name: Optional[str] = None

    def apply(self, step: Any) -> Any:
        """Apply the template to a step. Returns whatever the callback returns."""
        return self.callback(step)


def pipeline(callback: Callable[[Any], Any]) -> PipelineDefinition:
    """Decorator turning a function into a PipelineDefinition."""
    return PipelineDefinition(callback=callback, name=getattr(callback, "__name__", None))


def template(callback: Callable[[Any], Any]) -> TemplateDefinition:
    """Decorator turning a function into a TemplateDefinition."""
    return TemplateDefinition(callback=callback, name=getattr(callback, "__name__", None))
