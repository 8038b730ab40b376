"""
Manifest and ManifestRegistry - named sets of files a pipeline cares about.

A manifest is a text file of glob patterns, one per line:

    # comments and blank lines are ignored
    app/**/*.py
    requirements.txt
    !app/vendor/**

The manifest's name is the file stem (manifests/basic.manifest -> "basic").

The registry is created per build and passed to the Pipeline. It holds at most
one manifest per name:
- Loading the same file twice returns the already registered manifest
- Loading a different file under an existing name raises ManifestConflictError
"""

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from kitebuilder.errors import ManifestConflictError

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".manifest"


@dataclass(frozen=True)
class Manifest:
    """
    A named, loaded manifest.

    Attributes:
        name: Unique name (file stem)
        path: Resolved path of the manifest file
        patterns: Glob patterns in file order; a leading "!" excludes matches
    """
    name: str
    path: Path
    patterns: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_file(cls, path: Path | str) -> "Manifest":
        """Parse a manifest file."""
        path = Path(path).resolve()
        patterns = []
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            patterns.append(line)
        return cls(name=path.stem, path=path, patterns=tuple(patterns))

    def files(self, base: Path | str) -> list[str]:
        """
        Expand the patterns against a base directory.

        Patterns are applied in order, so a later "!pattern" removes files an
        earlier pattern added.

        Args:
            base: Directory the patterns are relative to

        Returns:
            Sorted POSIX paths relative to base
        """
        base = Path(base)
        selected: set[str] = set()
        for pattern in self.patterns:
            exclude = pattern.startswith("!")
            glob = pattern[1:] if exclude else pattern
            matches = {
                p.relative_to(base).as_posix()
                for p in base.glob(glob)
                if p.is_file()
            }
            if exclude:
                selected -= matches
            else:
                selected |= matches
        return sorted(selected)

    def digest(self, base: Path | str) -> str:
        """
        SHA256 over the manifest's files (relative path and contents).

        Changes whenever a matched file is added, removed, or modified.
        """
        base = Path(base)
        sha = hashlib.sha256()
        for relative in self.files(base):
            sha.update(relative.encode())
            sha.update(b"\0")
            sha.update((base / relative).read_bytes())
            sha.update(b"\0")
        return sha.hexdigest()


class ManifestRegistry:
    """
    Registry of manifests loaded for one build.

    Usage:
        registry = ManifestRegistry()
        manifest = registry.load("manifests/basic.manifest")
        registry.get("basic") is manifest
    """

    def __init__(self) -> None:
        self._manifests: dict[str, Manifest] = {}

    def load(self, path: Path | str) -> Manifest:
        """
        Load a manifest file and register it under its name.

        Args:
            path: Path to the manifest file

        Returns:
            The registered manifest (the existing one if this path was loaded before)

        Raises:
            ManifestConflictError: If a different file is registered under the same name
        """
        resolved = Path(path).resolve()
        existing = self._manifests.get(resolved.stem)
        if existing is not None:
            if existing.path == resolved:
                return existing
            raise ManifestConflictError(
                f"Manifest '{resolved.stem}' is already registered from {existing.path}, "
                f"cannot register {resolved}"
            )

        manifest = Manifest.from_file(resolved)
        self._manifests[manifest.name] = manifest
        logger.debug(f"Loaded manifest: {manifest.name} ({len(manifest.patterns)} patterns)")
        return manifest

    def get(self, name: str) -> Optional[Manifest]:
        """Get a manifest by name, or None."""
        return self._manifests.get(name)

    def all(self) -> dict[str, Manifest]:
        """All registered manifests by name (a copy)."""
        return dict(self._manifests)

    def __contains__(self, name: object) -> bool:
        return name in self._manifests

    def __len__(self) -> int:
        return len(self._manifests)
