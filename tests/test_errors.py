"""Tests for kitebuilder error classes.

Tests cover:
- Error hierarchy
- Validation errors caught through their shared base
- Exceptions carry their message
"""

import pytest

from kitebuilder.errors import (
    ConfigError,
    KitebuilderError,
    ManifestConflictError,
    PipelineNotFoundError,
    PipelineValidationError,
    TemplateNotFoundError,
    TemplateValidationError,
    UploadError,
    ValidationError,
)


class TestKitebuilderError:
    """Tests for base KitebuilderError."""

    def test_is_exception(self):
        assert issubclass(KitebuilderError, Exception)

    def test_has_message(self):
        error = KitebuilderError("my message")
        assert str(error) == "my message"


class TestValidationErrors:
    """Tests for PipelineValidationError and TemplateValidationError."""

    @pytest.mark.parametrize("error_class", [PipelineValidationError, TemplateValidationError])
    def test_is_validation_error(self, error_class):
        assert issubclass(error_class, ValidationError)
        assert issubclass(error_class, KitebuilderError)

    def test_can_be_caught_as_validation_error(self):
        with pytest.raises(ValidationError):
            raise TemplateValidationError("bad step")

    def test_kinds_are_distinct(self):
        assert not issubclass(PipelineValidationError, TemplateValidationError)
        assert not issubclass(TemplateValidationError, PipelineValidationError)


class TestOtherErrors:
    """Tests for errors outside the validation group."""

    @pytest.mark.parametrize(
        "error_class",
        [UploadError, ManifestConflictError, PipelineNotFoundError, TemplateNotFoundError, ConfigError],
    )
    def test_is_kitebuilder_error(self, error_class):
        assert issubclass(error_class, KitebuilderError)
        assert not issubclass(error_class, ValidationError)

    def test_upload_error_message(self):
        """UploadError should keep the agent's failure text."""
        with pytest.raises(KitebuilderError, match="exit code 1"):
            raise UploadError("pipeline upload failed with exit code 1")
