"""
kitebuilder.loaders - Load the pieces of a pipeline root from disk.

    manifests    manifests/*.manifest     -> ManifestRegistry
    extensions   extensions/*.py          -> Extension subclasses (plus entry points)
    templates    templates/<name>.py      -> TemplateDefinition (lazy, cached)
    pipelines    pipeline.py              -> PipelineDefinition
"""

from . import extensions, manifests, pipelines, templates
from .templates import TemplateLibrary

__all__ = ["extensions", "manifests", "pipelines", "templates", "TemplateLibrary"]
