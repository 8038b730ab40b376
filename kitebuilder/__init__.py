"""
kitebuilder - Build CI pipelines in Python and upload them through buildkite-agent.

A pipeline root holds a pipeline.py declaring steps with the DSL, plus optional
manifests, templates and extensions. kitebuilder evaluates it into a
canonical YAML document and uploads it.
"""

__version__ = "0.1.0"


__all__ = [
    "Pipeline",
    "Extension",
    "ManifestRegistry",
    "pipeline",
    "template",
    "load_config",
]

from .builder import Pipeline
from .config import load_config
from .definition import pipeline, template
from .extension import Extension
from .manifest import ManifestRegistry
