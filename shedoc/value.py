"""Value notation parsing."""

from __future__ import annotations

from .exceptions import ValueNotationError
from .models import Value

VARIADIC_SUFFIX = "..."


def parse_value(text: str) -> Value:
    """Parse value notation into a `Value`.

    Accepts ``<name>`` (required), ``[name]`` (optional), ``[name=default]``,
    ``<name...>`` and ``[name...]`` (variadic). Defaults are only allowed on
    optional values; the text after the first ``=`` is the default and may be
    empty.

    Args:
        text: Notation to parse; surrounding whitespace is ignored.

    Returns:
        Value: The parsed value descriptor.

    Raises:
        ValueNotationError: If the brackets are missing or mismatched, the name
            is empty, or a required value declares a default.

    Examples:
        parse_value("[type=json]")  # Value(name="type", required=False, default="json")
        parse_value("<files...>")  # Value(name="files", required=True, variadic=True)
    """
    notation = text.strip()
    if len(notation) < 3:
        raise ValueNotationError(notation)

    opening, closing = notation[0], notation[-1]
    if opening == "<" and closing == ">":
        required = True
    elif opening == "[" and closing == "]":
        required = False
    else:
        raise ValueNotationError(notation, "must be <...> or [...]")

    inner = notation[1:-1]
    if not inner:
        raise ValueNotationError(notation, "empty name")

    variadic = False
    if inner.endswith(VARIADIC_SUFFIX):
        variadic = True
        inner = inner[: -len(VARIADIC_SUFFIX)]
        if not inner:
            raise ValueNotationError(notation, "empty name before ...")

    default = None
    if "=" in inner:
        if required:
            raise ValueNotationError(notation, "defaults not allowed in required values")
        inner, default = inner.split("=", 1)
        if not inner:
            raise ValueNotationError(notation, "empty name before =")

    return Value(name=inner, required=required, default=default, variadic=variadic)
