# kiwisdk/filter.py
"""Builder for backend filter expressions.

A filter template names its parameters with ``{:name}`` placeholders::

    Filter("user = {:user} && age > {:age}", {"user": "john", "age": 30}).build()
    # -> "(user='john'&&age>30)"

String values are wrapped in single quotes *without escaping*. A value that
itself contains a single quote changes the meaning of the expression, so never
pass untrusted input as a string parameter without validating it first.
"""

import re

from .exceptions import ValidationError
from .log_config import logger
from .types import FilterParams, FilterValue

PLACEHOLDER_PATTERN = re.compile(r"\{:([^{}]+)\}")


def _render_float(value: float) -> str:
    # Integral floats drop the trailing ".0"; large magnitudes keep exponent form
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(value)


def render_value(value: FilterValue) -> str:
    """Renders a single parameter value as it appears in a filter expression.

    Raises:
        ValidationError: If the value is not a str, number, bool or None.
    """
    # bool is checked before int since it is a subclass of it
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, float):
        return _render_float(value)
    if isinstance(value, int):
        return str(value)
    if value is None:
        return "null"
    raise ValidationError(
        f"Unsupported filter value type {type(value).__name__}: {value!r}"
    )


class Filter:
    """A filter template plus the values for its placeholders.

    Attributes:
        content: The template, e.g. ``"id = {:id}"``.
        params: Values keyed by placeholder name.
    """

    def __init__(self, content: str, params: FilterParams | None = None):
        self.content = content
        self.params: dict[str, FilterValue] = dict(params or {})

    def build(self, *, strict: bool = False) -> str:
        """Renders the template into a finished filter expression.

        Every ``{:name}`` token with a matching parameter is replaced by the
        rendered value. Spaces are then removed and the result is wrapped in
        one pair of parentheses.

        Placeholders without a parameter are left as they are and unused
        parameters are ignored, unless ``strict`` is set.

        Args:
            strict: Raise instead of leaving placeholders unresolved.

        Returns:
            The filter expression, ready for the ``filter`` query parameter.

        Raises:
            ValidationError: For unsupported value types, or for unresolved
                placeholders when ``strict`` is True.
        """
        rendered = {key: render_value(value) for key, value in self.params.items()}
        unresolved: list[str] = []

        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            if name in rendered:
                return rendered[name]
            unresolved.append(name)
            return match.group(0)

        # One pass, so placeholder-like text inside a value is never re-expanded
        result = PLACEHOLDER_PATTERN.sub(substitute, self.content)

        if unresolved:
            if strict:
                raise ValidationError(
                    f"Unresolved filter placeholders: {', '.join(sorted(set(unresolved)))}"
                )
            logger.debug(f"Filter placeholders left unresolved: {unresolved}")

        result = result.replace(" ", "")
        return f"({result})"

    def __str__(self) -> str:
        return self.build()

    def __repr__(self) -> str:
        return f"Filter({self.content!r}, {self.params!r})"


def build_filter(content: str, params: FilterParams | None = None) -> str:
    """Shortcut for ``Filter(content, params).build()``."""
    return Filter(content, params).build()
