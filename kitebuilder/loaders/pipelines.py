"""Load the PipelineDefinition exported by <root>/pipeline.py."""

from pathlib import Path

from kitebuilder.definition import PipelineDefinition
from kitebuilder.errors import PipelineNotFoundError
from kitebuilder.utils import load_module
from kitebuilder.validation import validate_pipeline_definition

PIPELINE_FILENAME = "pipeline.py"
PIPELINE_ATTRIBUTE = "pipeline"


def load(root: Path | str) -> PipelineDefinition:
    """
    Import pipeline.py from a pipeline root and validate its export.

    Raises:
        PipelineNotFoundError: If pipeline.py does not exist
        PipelineValidationError: If `pipeline` is not a PipelineDefinition
    """
    path = Path(root) / PIPELINE_FILENAME
    if not path.exists():
        raise PipelineNotFoundError(f"Pipeline definition not found: {path}")

    module = load_module(path)
    return validate_pipeline_definition(
        getattr(module, PIPELINE_ATTRIBUTE, None),
        source=f"`{PIPELINE_ATTRIBUTE}` in {path}",
    )
