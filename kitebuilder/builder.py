"""
Pipeline - build a pipeline root and upload it through the agent.

Constructing a Pipeline loads its root:

    1. manifests    <root>/manifests/*.manifest registered in the build's registry
    2. extensions   discovered, instantiated, prepare() run in load order

The definition itself is evaluated once, on the first evaluate(), to_dict(),
to_yaml() or upload(). Steps declared on pipeline.dsl before then come first:

    3. pipeline     <root>/pipeline.py evaluated against the DSL
    4. extensions   build() run in load order

upload() then writes the document to a temporary directory, uploads each
artifact followed by the document, uploads the document as the pipeline, and
always removes the temporary directory:

    pipeline = Pipeline.build(".buildkite/pipelines/app")
    pipeline.artifacts.append("coverage/summary.json")
    pipeline.upload()

Usage in tests (agent injected, no buildkite-agent needed):

    pipeline = Pipeline(root, agent=FakeAgent())
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from kitebuilder import serializer
from kitebuilder.agent import Agent, AgentCommand
from kitebuilder.dsl import Dsl
from kitebuilder.errors import UploadError
from kitebuilder.extension import Extension
from kitebuilder.loaders import extensions as extension_loader
from kitebuilder.loaders import manifests as manifest_loader
from kitebuilder.loaders import pipelines as pipeline_loader
from kitebuilder.loaders.templates import TemplateLibrary
from kitebuilder.manifest import Manifest, ManifestRegistry
from kitebuilder.schemas import PipelineDocument
from kitebuilder.validation import validate_document

PIPELINE_DOCUMENT = "pipeline.yml"


@dataclass(frozen=True)
class GeneratedArtifact:
    """
    Artifact content written to a transient file during upload().

    Attributes:
        name: File name inside the upload's temporary directory
        content: Text or bytes to write
    """
    name: str
    content: Union[str, bytes]

    def write(self, directory: Path) -> Path:
        path = directory / self.name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(self.content, bytes):
            path.write_bytes(self.content)
        else:
            path.write_text(self.content, encoding="utf-8")
        return path


ArtifactRef = Union[str, Path, GeneratedArtifact]


class Pipeline:
    """
    One pipeline build.

    Attributes:
        root: Pipeline root directory
        logger: Logger for build messages
        registry: Manifests loaded for this build
        document: Steps and env declared so far
        dsl: Declaration context bound to document
        templates: Templates of this root
        extensions: Extension instances, in load order
        artifacts: Paths (caller-owned) and GeneratedArtifacts to upload
    """

    def __init__(
        self,
        root: Path | str,
        logger: Optional[logging.Logger] = None,
        registry: Optional[ManifestRegistry] = None,
        agent: Optional[Agent] = None,
    ):
        self.root = root
        self.logger = logger or logging.getLogger(__name__)
        self.registry = registry if registry is not None else ManifestRegistry()
        self.agent = agent if agent is not None else AgentCommand()
        self.artifacts: list[ArtifactRef] = []

        self.document = PipelineDocument()
        self.templates = TemplateLibrary(root)
        self.dsl = Dsl(self.document, self.templates)
        self.extensions: list[Extension] = []
        self._evaluated = False

        self._load_manifests()
        self._load_extensions()

    @classmethod
    def build(cls, root: Path | str, **kwargs: Any) -> "Pipeline":
        """Load the pipeline at root and evaluate its definition."""
        pipeline = cls(root, **kwargs)
        pipeline.evaluate()
        return pipeline

    @property
    def manifests(self) -> dict[str, Manifest]:
        return self.registry.all()

    def _load_manifests(self) -> None:
        loaded = manifest_loader.load(self.root, self.registry)
        self.logger.debug(f"Loaded {len(loaded)} manifest(s) from {self.root}")

    def _load_extensions(self) -> None:
        for extension_class in extension_loader.load(self.root):
            extension = extension_class(self)
            extension.prepare()
            self.extensions.append(extension)

    def evaluate(self) -> PipelineDocument:
        """
        Evaluate pipeline.py, then run each extension's build() hook.

        Runs once; later calls return the same document. If evaluation raises,
        the steps and env it declared are discarded and the next call retries.
        """
        if self._evaluated:
            return self.document

        steps, env = list(self.document.steps), dict(self.document.env)
        try:
            definition = pipeline_loader.load(self.root)
            definition.evaluate(self.dsl)
            for extension in self.extensions:
                extension.build()
        except Exception:
            self.document.steps[:] = steps
            self.document.env.clear()
            self.document.env.update(env)
            raise

        self._evaluated = True
        self.logger.info(f"Built pipeline {self.root}: {len(self.document.steps)} step(s)")
        return self.document

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Evaluate (once), validate the document and map it to the wire schema."""
        return serializer.to_dict(validate_document(self.evaluate()))

    def to_yaml(self) -> str:
        """Evaluate (once), validate the document and render it as YAML."""
        return serializer.to_yaml(validate_document(self.evaluate()))

    # ------------------------------------------------------------------
    # Upload
    # ------------------------------------------------------------------

    def create_artifact(self, name: str, content: Union[str, bytes]) -> GeneratedArtifact:
        """
        Register generated artifact content.

        The content is written to a transient file during upload() and
        deleted afterwards.
        """
        relative = Path(name)
        if relative.is_absolute() or ".." in relative.parts:
            raise ValueError(f"Artifact name must be a relative path inside the upload directory: {name}")
        if relative.as_posix() == PIPELINE_DOCUMENT:
            raise ValueError(f"Artifact name is reserved for the pipeline document: {name}")
        artifact = GeneratedArtifact(name=name, content=content)
        self.artifacts.append(artifact)
        return artifact

    def upload(self) -> None:
        """
        Upload artifacts and the pipeline document, then the pipeline.

        Raises:
            ValidationError: If the document is invalid (nothing is uploaded)
            UploadError: If any agent call fails (remaining calls are skipped)
        """
        contents = self.to_yaml()

        with tempfile.TemporaryDirectory(prefix="kitebuilder-", ignore_cleanup_errors=True) as tmp:
            directory = Path(tmp)
            document_path = directory / PIPELINE_DOCUMENT
            document_path.write_text(contents, encoding="utf-8")

            paths = [self._artifact_path(artifact, directory) for artifact in self.artifacts]
            paths.append(document_path)

            for path in paths:
                self._call_agent("artifact", path)
            self._call_agent("pipeline", document_path)

        self.logger.info(f"Uploaded pipeline with {len(paths) - 1} custom artifact(s)")

    @staticmethod
    def _artifact_path(artifact: ArtifactRef, directory: Path) -> Path:
        if isinstance(artifact, GeneratedArtifact):
            return artifact.write(directory)
        return Path(artifact)

    def _call_agent(self, operation: str, path: Path) -> None:
        self.logger.debug(f"Uploading {operation}: {path}")
        try:
            result = getattr(self.agent, operation)("upload", str(path))
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(f"{operation} upload failed for {path}: {e}") from e

        if result is False:
            raise UploadError(f"{operation} upload failed for {path}")
