"""
Extension base class.

Extensions contribute declarations to a build alongside the pipeline file.
They are discovered by kitebuilder.loaders.extensions and run in two phases:

    prepare()   before the pipeline file is evaluated
    build()     after the pipeline file is evaluated

Example (extensions/lint.py in a pipeline root):

    from kitebuilder import Extension

    class Lint(Extension):
        def prepare(self):
            self.dsl.command(lambda step: step.label("Lint").command("make lint"))
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kitebuilder.dsl import Dsl
    from kitebuilder.builder import Pipeline


class Extension:
    """
    Base class for build extensions.

    Attributes:
        context: The Pipeline being built
    """

    def __init__(self, context: "Pipeline"):
        self.context = context

    @property
    def dsl(self) -> "Dsl":
        return self.context.dsl

    def prepare(self) -> None:
        """Hook run before the pipeline definition is evaluated."""
        pass

    def build(self) -> None:
        """Hook run after the pipeline definition is evaluated."""
        pass
