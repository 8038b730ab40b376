"""
Serialization of a PipelineDocument to the agent's wire schema.

    ---
    steps:
    - label: Basic step
      command:
      - 'true'
    env:
      FOO: foo

Both functions are pure. to_yaml(doc) parses back to exactly to_dict(doc).
"""

import copy
from typing import Any

import yaml

from kitebuilder.schemas import PipelineDocument


class _Dumper(yaml.SafeDumper):
    # Values shared between steps must be written out in full, not as &id anchors
    def ignore_aliases(self, data):
        return True


def to_dict(document: PipelineDocument) -> dict[str, Any]:
    """
    Map a document to the wire mapping.

    Returns:
        {"steps": [...]} plus "env" when any environment was declared
    """
    result: dict[str, Any] = {
        "steps": [copy.deepcopy(step.to_dict()) for step in document.steps],
    }
    if document.env:
        result["env"] = dict(document.env)
    return result


def to_yaml(document: PipelineDocument) -> str:
    """Render a document as a block-style YAML document with a --- header."""
    return dump_yaml(to_dict(document))


def dump_yaml(data: dict[str, Any]) -> str:
    return yaml.dump(
        data,
        Dumper=_Dumper,
        explicit_start=True,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
    )
