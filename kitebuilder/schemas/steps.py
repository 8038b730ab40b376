"""
Step schemas - the six kinds of step a pipeline can contain.

A step is one unit of CI work. Each kind is a closed subclass of Step:

    command  -> CommandStep   (runs commands on an agent)
    trigger  -> TriggerStep   (triggers another pipeline)
    wait     -> WaitStep      (waits for previous steps)
    block    -> BlockStep     (manual unblock)
    input    -> InputStep     (collects input)
    skip     -> SkipStep      (a command step that is skipped)

Steps are mutable builders. The DSL hands a fresh step to each declaration
callback, which sets attributes on it:

    step.label("Tests")
    step.command("make test")

Attributes are kept in the order they were first set, which is the order they
are serialized in. Setting an attribute the kind does not allow raises
TemplateValidationError. Every kind except wait has a primary attribute
(command, trigger, block, input, skip) that must be set before the step is
valid.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from kitebuilder.errors import TemplateValidationError

# Python keywords cannot be keyword arguments, so the DSL accepts these spellings
ALIASES = {"if_": "if", "async_": "async"}


def plain(value: Any) -> Any:
    """Convert tuples and other non-string sequences to lists, and mappings to dicts."""
    if isinstance(value, Mapping):
        return {k: plain(v) for k, v in value.items()}
    if isinstance(value, (str, bytes)):
        return value
    if isinstance(value, Sequence):
        return [plain(v) for v in value]
    return value


class attribute:
    """
    Declares a chainable accessor for one step attribute.

    Calling the accessor with a value sets it and returns the step. Calling it
    with no arguments returns the current value (or None).
    """

    def __init__(self, key: Optional[str] = None):
        self.key = key

    def __set_name__(self, owner, name):
        if self.key is None:
            self.key = name

    def __get__(self, step, owner=None):
        if step is None:
            return self
        key = self.key

        def accessor(*values):
            if not values:
                return step.get(key)
            return step.set(key, values[0] if len(values) == 1 else list(values))

        accessor.__name__ = key
        return accessor


@dataclass
class Step:
    """
    Base class for every step kind.

    Attributes:
        attributes: Wire attributes in the order they were first set
        primary: Attribute every step of the kind must set (None for wait)
    """
    kind: ClassVar[str] = ""
    primary: ClassVar[Optional[str]] = None
    allowed: ClassVar[frozenset] = frozenset()

    attributes: dict[str, Any] = field(default_factory=dict)

    key = attribute()
    depends_on = attribute()
    condition = attribute("if")
    allow_dependency_failure = attribute()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        keys = set()
        for klass in cls.__mro__:
            for value in vars(klass).values():
                if isinstance(value, attribute):
                    keys.add(value.key)
        cls.allowed = frozenset(keys)

    def set(self, name: str, value: Any) -> "Step":
        """
        Set an attribute by its wire name.

        Args:
            name: Wire name (or one of the if_/async_ aliases)
            value: Attribute value

        Returns:
            The step, for chaining

        Raises:
            TemplateValidationError: If the kind does not allow the attribute
        """
        name = ALIASES.get(name, name)
        if name not in self.allowed:
            raise TemplateValidationError(
                f"'{name}' is not a valid attribute for a {self.kind} step "
                f"(allowed: {', '.join(sorted(self.allowed))})"
            )
        self.attributes[name] = self._coerce(name, plain(value))
        return self

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(ALIASES.get(name, name), default)

    def has(self, name: str) -> bool:
        return ALIASES.get(name, name) in self.attributes

    def _coerce(self, name: str, value: Any) -> Any:
        return value

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire mapping for this step."""
        return dict(self.attributes)

    @property
    def label_text(self) -> str:
        """Human-readable name used in log messages."""
        return str(self.attributes.get("label") or self.attributes.get(self.kind) or self.kind)


class CommandStep(Step):
    """Runs one or more commands on an agent. Each command() call appends."""
    kind = "command"
    primary = "command"

    command = attribute()
    label = attribute()
    branches = attribute()
    env = attribute()
    agents = attribute()
    artifact_paths = attribute()
    timeout_in_minutes = attribute()
    soft_fail = attribute()
    retry = attribute()
    parallelism = attribute()
    plugins = attribute()

    def _coerce(self, name, value):
        if name == "command":
            commands = [value] if isinstance(value, str) else list(value)
            return self.attributes.get("command", []) + [str(c) for c in commands]
        if name == "env":
            return {str(k): str(v) for k, v in dict(value).items()}
        return value

    def plugin(self, name: str, options: Optional[dict[str, Any]] = None) -> "CommandStep":
        """Append a plugin entry ({name: options}) to the step's plugins."""
        plugins = list(self.attributes.get("plugins", []))
        plugins.append({name: options})
        return self.set("plugins", plugins)


class TriggerStep(Step):
    """Triggers a build of another pipeline."""
    kind = "trigger"
    primary = "trigger"

    trigger = attribute()
    label = attribute()
    build = attribute()
    async_ = attribute("async")
    branches = attribute()

    def _coerce(self, name, value):
        if name == "trigger":
            return str(value)
        return value


class WaitStep(Step):
    """
    Waits for all previous steps to finish.

    Always serializes "wait: null". continue_on_failure is only emitted when
    it is true.
    """
    kind = "wait"

    continue_on_failure = attribute()

    def to_dict(self):
        result: dict[str, Any] = {"wait": None}
        for name, value in self.attributes.items():
            if name == "continue_on_failure" and value is not True:
                continue
            result[name] = value
        return result


class BlockStep(Step):
    """Pauses the build until it is manually unblocked."""
    kind = "block"
    primary = "block"

    block = attribute()
    prompt = attribute()
    fields = attribute()
    blocked_state = attribute()
    branches = attribute()


class InputStep(Step):
    """Collects information from a user."""
    kind = "input"
    primary = "input"

    input = attribute()
    prompt = attribute()
    fields = attribute()
    branches = attribute()


class SkipStep(Step):
    """
    A command step that is skipped with a reason.

    Serializes "command: null" right after the reason. That distinguishes a
    skipped step from one that never declared a command.
    """
    kind = "skip"
    primary = "skip"

    skip = attribute()
    label = attribute()
    branches = attribute()

    def to_dict(self):
        result: dict[str, Any] = {}
        for name, value in self.attributes.items():
            result[name] = value
            if name == "skip":
                result["command"] = None
        result.setdefault("command", None)
        return result


STEP_TYPES: dict[str, type[Step]] = {
    cls.kind: cls
    for cls in (CommandStep, TriggerStep, WaitStep, BlockStep, InputStep, SkipStep)
}


def step_for_kind(kind: str) -> Step:
    """
    Create an empty step of the given kind.

    Raises:
        TemplateValidationError: If the kind is unknown
    """
    try:
        return STEP_TYPES[kind]()
    except KeyError:
        raise TemplateValidationError(
            f"Unknown step kind: {kind} (expected one of {', '.join(STEP_TYPES)})"
        ) from None
