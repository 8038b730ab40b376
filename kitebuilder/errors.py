"""
Error classes for kitebuilder.

Errors raised while building a pipeline fall into two groups:
- ValidationError: The declared pipeline or one of its steps has an invalid shape.
  Always raised before anything is serialized or uploaded.
- UploadError: The agent failed to upload an artifact or the pipeline document.

Error handling contract:
- Errors are exceptions, not values
- Nothing is retried; the CLI boundary reports and exits
"""


class KitebuilderError(Exception):
    """Base exception for kitebuilder."""
    pass


class ValidationError(KitebuilderError):
    """A definition does not have the shape kitebuilder expects."""
    pass


class PipelineValidationError(ValidationError):
    """
    The root pipeline definition is invalid.

    Examples:
    - pipeline.py does not export a PipelineDefinition
    - The document's steps are not a list
    """
    pass


class TemplateValidationError(ValidationError):
    """
    A step definition is invalid.

    Examples:
    - A template file does not export a TemplateDefinition
    - A step callback returns something other than the step it was given
    - An attribute is not allowed for the step's kind
    """
    pass


class UploadError(KitebuilderError):
    """The agent failed to upload an artifact or pipeline."""
    pass


class ManifestConflictError(KitebuilderError):
    """Two different manifest files were registered under the same name."""
    pass


class PipelineNotFoundError(KitebuilderError):
    """No pipeline definition exists at the requested root."""
    pass


class TemplateNotFoundError(KitebuilderError):
    """A step referenced a template that does not exist."""
    pass


class ConfigError(KitebuilderError):
    """Configuration validation error."""
    pass
