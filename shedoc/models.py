"""Data models for shedoc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


def _join_description(existing: str, addition: str) -> str:
    if not existing:
        return addition
    return f"{existing} {addition}"


def _is_empty(value: Any) -> bool:
    return value is None or value is False or value == "" or value == [] or value == {}


def _compact(fields: dict[str, Any], always: tuple[str, ...] = ()) -> dict[str, Any]:
    """Drop empty entries from a serialized mapping, except the keys in `always`."""
    return {key: value for key, value in fields.items() if key in always or not _is_empty(value)}


class Visibility(str, Enum):
    """Access level of a documentation block.

    Attributes:
        COMMAND: The script's main command.
        SUBCOMMAND: A user-facing subcommand; the block carries its name.
        PUBLIC: A public library function.
        PRIVATE: An internal helper function.
    """

    COMMAND = "command"
    SUBCOMMAND = "subcommand"
    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class Value:
    """Parsed value notation: ``<required>``, ``[optional]``, ``[opt=default]``, ``<var...>``.

    Attributes:
        name: Value name, never empty.
        required: True for ``<...>``, False for ``[...]``.
        default: Default value; only optional values carry one. An empty
            string means ``[name=]``.
        variadic: True when the notation ends with ``...``.
    """

    name: str
    required: bool
    default: str | None = None
    variadic: bool = False

    def notation(self) -> str:
        """Rebuild the canonical bracket notation for this value.

        Examples:
            Value("file", True, variadic=True).notation()  # "<file...>"
        """
        suffix = "..." if self.variadic else ""
        if self.required:
            return f"<{self.name}{suffix}>"
        if self.default is not None:
            return f"[{self.name}={self.default}{suffix}]"
        return f"[{self.name}{suffix}]"

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "required": self.required,
                "default": self.default,
                "variadic": self.variadic,
            },
            always=("name", "required"),
        )


@dataclass
class Flag:
    """A boolean flag: ``@flag -s | --long description``."""

    short: str | None = None
    long: str | None = None
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "short": self.short,
                "long": self.long,
                "description": self.description,
                "line": self.line,
            },
            always=("line",),
        )


@dataclass
class Option:
    """An option taking a value: ``@option -f | --format <value> description``."""

    value: Value
    short: str | None = None
    long: str | None = None
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "short": self.short,
                "long": self.long,
                "value": self.value.to_dict(),
                "description": self.description,
                "line": self.line,
            },
            always=("value", "line"),
        )


@dataclass
class Operand:
    """A positional argument: ``@operand <name> description``."""

    value: Value
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"value": self.value.to_dict(), "description": self.description, "line": self.line},
            always=("value", "line"),
        )


@dataclass
class _NamedRecord:
    name: str
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"name": self.name, "description": self.description, "line": self.line},
            always=("name", "line"),
        )


@dataclass
class Env(_NamedRecord):
    """An environment variable read: ``@env VAR_NAME description``."""


@dataclass
class Sets(_NamedRecord):
    """An environment variable set: ``@sets VAR_NAME description``."""


@dataclass
class _PathRecord:
    path: str
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"path": self.path, "description": self.description, "line": self.line},
            always=("path", "line"),
        )


@dataclass
class Reads(_PathRecord):
    """An implicit file read: ``@reads <path> description``."""


@dataclass
class Writes(_PathRecord):
    """An implicit file write: ``@writes <path> description``."""


@dataclass
class Exit:
    """An exit status: ``@exit <code> description``. The code is kept as text."""

    code: str
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {"code": self.code, "description": self.description, "line": self.line},
            always=("code", "line"),
        )


@dataclass
class _StreamRecord:
    description: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.description = _join_description(self.description, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact({"description": self.description, "line": self.line}, always=("line",))


@dataclass
class Stdin(_StreamRecord):
    """Standard input: ``@stdin description``."""


@dataclass
class Stdout(_StreamRecord):
    """Standard output: ``@stdout description``."""


@dataclass
class Stderr(_StreamRecord):
    """Standard error: ``@stderr description``."""


@dataclass
class Deprecated:
    """Deprecation marker: ``@deprecated [message]``.

    An empty message still marks the block as deprecated.
    """

    message: str = ""
    line: int = 0

    def extend(self, text: str) -> None:
        self.message = _join_description(self.message, text)

    def to_dict(self) -> dict[str, Any]:
        return _compact({"message": self.message, "line": self.line}, always=("line",))


TagRecord = Union[
    Flag, Option, Operand, Env, Reads, Stdin, Exit, Stdout, Stderr, Sets, Writes, Deprecated
]


@dataclass
class Block:
    """A single ``#@/`` documentation block.

    Attributes:
        visibility: Access level parsed from the block header.
        name: Subcommand token; only set for subcommand blocks.
        description: Free text preceding the first tag, newline-joined.
        function_name: Function declared right after the block, if any.
        line: One-based line number of the block header.
        stdin: Single stdin descriptor; None when the tag is absent.
        stdout: Single stdout descriptor; None when the tag is absent.
        stderr: Single stderr descriptor; None when the tag is absent.
        deprecated: Deprecation marker; None when the block is not deprecated.
    """

    visibility: Visibility = Visibility.PUBLIC
    name: str | None = None
    description: str = ""
    function_name: str | None = None
    line: int = 0

    # Inputs
    flags: list[Flag] = field(default_factory=list)
    options: list[Option] = field(default_factory=list)
    operands: list[Operand] = field(default_factory=list)
    env: list[Env] = field(default_factory=list)
    reads: list[Reads] = field(default_factory=list)
    stdin: Stdin | None = None

    # Outputs
    exit: list[Exit] = field(default_factory=list)
    stdout: Stdout | None = None
    stderr: Stderr | None = None
    sets: list[Sets] = field(default_factory=list)
    writes: list[Writes] = field(default_factory=list)

    deprecated: Deprecated | None = None

    def to_dict(self) -> dict[str, Any]:
        def records(items):
            return [item.to_dict() for item in items]

        def single(item):
            return None if item is None else item.to_dict()

        return _compact(
            {
                "visibility": self.visibility.value,
                "name": self.name,
                "description": self.description,
                "functionName": self.function_name,
                "line": self.line,
                "flags": records(self.flags),
                "options": records(self.options),
                "operands": records(self.operands),
                "env": records(self.env),
                "reads": records(self.reads),
                "stdin": single(self.stdin),
                "exit": records(self.exit),
                "stdout": single(self.stdout),
                "stderr": single(self.stderr),
                "sets": records(self.sets),
                "writes": records(self.writes),
                "deprecated": single(self.deprecated),
            },
            always=("visibility", "line"),
        )


@dataclass
class Meta:
    """File-level metadata from ``#?/`` tags."""

    name: str | None = None
    version: str | None = None
    synopsis: str | None = None
    description: str | None = None
    examples: str | None = None
    section: str | None = None
    author: str | None = None
    license: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "name": self.name,
                "version": self.version,
                "synopsis": self.synopsis,
                "description": self.description,
                "examples": self.examples,
                "section": self.section,
                "author": self.author,
                "license": self.license,
            }
        )


META_FIELDS = (
    "name",
    "version",
    "synopsis",
    "description",
    "examples",
    "section",
    "author",
    "license",
)


@dataclass
class ParseWarning:
    """A non-fatal issue found while parsing.

    Attributes:
        line: One-based source line number.
        message: Human-readable description.
    """

    line: int
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "message": self.message}


@dataclass
class Document:
    """Parse result for a single shell script.

    Attributes:
        path: Source path, or None for stream input.
        shebang: Interpreter from the ``#!`` line, if present.
        meta: File-level metadata.
        blocks: Documentation blocks in source order.
        warnings: Non-fatal parse issues in source order.
    """

    path: str | None = None
    shebang: str | None = None
    meta: Meta = field(default_factory=Meta)
    blocks: list[Block] = field(default_factory=list)
    warnings: list[ParseWarning] = field(default_factory=list)

    def warn(self, line: int, message: str) -> None:
        self.warnings.append(ParseWarning(line, message))

    @property
    def command(self) -> Block | None:
        """The last ``command`` block, or None."""
        command = None
        for block in self.blocks:
            if block.visibility is Visibility.COMMAND:
                command = block
        return command

    @property
    def subcommands(self) -> list[Block]:
        """Subcommand blocks in source order."""
        return [block for block in self.blocks if block.visibility is Visibility.SUBCOMMAND]

    def to_dict(self) -> dict[str, Any]:
        return _compact(
            {
                "path": self.path,
                "shebang": self.shebang,
                "meta": self.meta.to_dict(),
                "blocks": [block.to_dict() for block in self.blocks],
                "warnings": [warning.to_dict() for warning in self.warnings],
            },
            always=("meta",),
        )


@dataclass
class TopState:
    """Parser state outside any block."""


@dataclass
class MetaBlockState:
    """Parser state while accumulating a multi-line ``#?/`` value.

    Attributes:
        tag: Metadata tag being accumulated.
        lines: Continuation content collected so far.
    """

    tag: str
    lines: list[str] = field(default_factory=list)


@dataclass
class DocBlockState:
    """Parser state while accumulating a ``#@/`` block.

    Attributes:
        block: Block under construction.
        description_lines: Free text seen before the first tag.
        in_tags: True once the first ``@tag`` line has been seen.
        pending: Parsed tag waiting for continuation lines, if any.
        continuation: Trimmed continuation lines for `pending`.
    """

    block: Block
    description_lines: list[str] = field(default_factory=list)
    in_tags: bool = False
    pending: TagRecord | None = None
    continuation: list[str] = field(default_factory=list)


ParserState = Union[TopState, MetaBlockState, DocBlockState]
