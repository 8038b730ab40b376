"""Load every manifest under <root>/manifests into a registry."""

from pathlib import Path

from kitebuilder.manifest import MANIFEST_SUFFIX, Manifest, ManifestRegistry

MANIFESTS_DIR = "manifests"


def load(root: Path | str, registry: ManifestRegistry) -> list[Manifest]:
    """
    Register all *.manifest files under <root>/manifests, sorted by name.

    Returns:
        The manifests loaded, in load order (empty if the directory is missing)
    """
    manifests_dir = Path(root) / MANIFESTS_DIR
    if not manifests_dir.is_dir():
        return []
    return [
        registry.load(path)
        for path in sorted(manifests_dir.glob(f"*{MANIFEST_SUFFIX}"))
    ]
