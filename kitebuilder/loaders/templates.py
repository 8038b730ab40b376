"""
Template loading.

A template lives in <root>/templates/<name>.py and must export `template`, a
TemplateDefinition. Templates are imported on first use and cached.
"""

from pathlib import Path

from kitebuilder.definition import TemplateDefinition
from kitebuilder.errors import TemplateNotFoundError
from kitebuilder.utils import load_module
from kitebuilder.validation import validate_template_definition

TEMPLATES_DIR = "templates"
TEMPLATE_ATTRIBUTE = "template"


class TemplateLibrary:
    """
    Lazily loaded templates of one pipeline root.

    Usage:
        library = TemplateLibrary(root)
        library.get("basic").apply(step)
    """

    def __init__(self, root: Path | str):
        self._templates_dir = Path(root) / TEMPLATES_DIR
        self._cache: dict[str, TemplateDefinition] = {}

    @property
    def templates_dir(self) -> Path:
        return self._templates_dir

    def get(self, name: str) -> TemplateDefinition:
        """
        Load a template by name.

        Raises:
            TemplateNotFoundError: If templates/<name>.py does not exist
            TemplateValidationError: If the file does not export a TemplateDefinition
        """
        if name in self._cache:
            return self._cache[name]

        path = self._templates_dir / f"{name}.py"
        if not path.exists():
            raise TemplateNotFoundError(f"Template not found: {name} (expected {path})")

        module = load_module(path)
        definition = validate_template_definition(
            getattr(module, TEMPLATE_ATTRIBUTE, None),
            source=f"`{TEMPLATE_ATTRIBUTE}` in {path}",
        )
        if definition.name != name:
            definition = TemplateDefinition(callback=definition.callback, name=name)

        self._cache[name] = definition
        return definition

    def list_templates(self) -> list[str]:
        """Names of all templates in the library."""
        if not self._templates_dir.is_dir():
            return []
        return sorted(p.stem for p in self._templates_dir.glob("*.py"))
