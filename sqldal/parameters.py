"""Named parameter binding.

Templates reference parameters with ``:name`` placeholders. Binding rewrites every placeholder occurrence, left to
right, into the positional marker of the target driver and collects the matching values in the same order. A name
used twice occupies two slots and is looked up twice.

Placeholders inside string literals, quoted identifiers, dollar-quoted bodies and comments are left alone, as are
PostgreSQL ``::type`` casts, ``:=`` assignments and numeric ``:1`` markers.
"""

import logging
import re
from collections.abc import Mapping
from enum import Enum
from functools import lru_cache
from typing import Any, Final, Optional

from sqldal.exceptions import ImproperConfigurationError, MissingParameterError, ParameterError
from sqldal.typing import ParameterMapping
from sqldal.utils.logging import get_logger

__all__ = (
    "POSITIONAL_STYLES",
    "BoundStatement",
    "ParameterBinder",
    "ParameterInfo",
    "ParameterStyle",
    "bind",
)

logger = get_logger("parameters")

PLACEHOLDER_CACHE_SIZE: Final[int] = 1024


class ParameterStyle(str, Enum):
    """Parameter style enumeration with string values."""

    QMARK = "qmark"
    NUMERIC = "numeric"
    POSITIONAL_COLON = "positional_colon"
    POSITIONAL_PYFORMAT = "pyformat_positional"
    NAMED_COLON = "named_colon"

    def __str__(self) -> str:
        """String representation for better error messages."""
        return self.value

    @classmethod
    def from_paramstyle(cls, paramstyle: str) -> "ParameterStyle":
        """Map a PEP 249 ``paramstyle`` to the positional style used for binding.

        Named styles map to their positional counterpart, since bound statements always carry ordered arguments.

        Args:
            paramstyle: Value of a DB-API module's ``paramstyle`` attribute.

        Raises:
            ImproperConfigurationError: If the paramstyle is unknown.

        Returns:
            The matching style.
        """
        try:
            return _PARAMSTYLE_MAP[paramstyle.lower()]
        except KeyError:
            msg = f"Unsupported DB-API paramstyle {paramstyle!r}"
            raise ImproperConfigurationError(msg) from None


_PARAMSTYLE_MAP: "dict[str, ParameterStyle]" = {
    "qmark": ParameterStyle.QMARK,
    "numeric": ParameterStyle.POSITIONAL_COLON,
    "named": ParameterStyle.POSITIONAL_COLON,
    "format": ParameterStyle.POSITIONAL_PYFORMAT,
    "pyformat": ParameterStyle.POSITIONAL_PYFORMAT,
}

POSITIONAL_STYLES: Final[frozenset[ParameterStyle]] = frozenset(
    {
        ParameterStyle.QMARK,
        ParameterStyle.NUMERIC,
        ParameterStyle.POSITIONAL_COLON,
        ParameterStyle.POSITIONAL_PYFORMAT,
    }
)


class ParameterInfo:
    """Immutable placeholder occurrence information."""

    __slots__ = ("name", "ordinal", "placeholder_text", "position", "style")

    def __init__(self, name: str, style: ParameterStyle, position: int, ordinal: int, placeholder_text: str) -> None:
        self.name = name
        self.style = style
        self.position = position
        self.ordinal = ordinal
        self.placeholder_text = placeholder_text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.name == other.name and self.style == other.style and self.position == other.position

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, ordinal={self.ordinal!r}, position={self.position!r})"

    def __hash__(self) -> int:
        return hash((self.name, self.style, self.position))


class BoundStatement:
    """Rewritten SQL paired with its ordered arguments.

    ``parameters[i]`` is the value for the ``i``-th positional marker in ``sql`` and ``parameter_names[i]`` the
    template name it came from.
    """

    __slots__ = ("parameter_names", "parameters", "sql", "style")

    def __init__(
        self,
        sql: str,
        parameters: "tuple[Any, ...]" = (),
        parameter_names: "tuple[str, ...]" = (),
        style: ParameterStyle = ParameterStyle.NUMERIC,
    ) -> None:
        if len(parameters) != len(parameter_names):
            msg = f"Bound statement has {len(parameters)} argument(s) for {len(parameter_names)} placeholder(s)"
            raise ParameterError(msg, sql)
        self.sql = sql
        self.parameters = parameters
        self.parameter_names = parameter_names
        self.style = style

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sql={self.sql!r}, parameters={self.parameters!r}, style={self.style!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundStatement):
            return NotImplemented
        return (
            self.sql == other.sql
            and self.parameters == other.parameters
            and self.parameter_names == other.parameter_names
            and self.style == other.style
        )

    def __hash__(self) -> int:
        try:
            parameters_hash = hash(self.parameters)
        except TypeError:
            parameters_hash = hash(repr(self.parameters))
        return hash((self.sql, parameters_hash, self.parameter_names, self.style))

    def __len__(self) -> int:
        return len(self.parameters)


_PARAMETER_REGEX: Final = re.compile(
    r"""
    # Literals and comments are matched first and copied through untouched
    # Standard SQL quoting: a doubled quote is the escape, backslash is an ordinary character
    (?P<dquote>"(?:[^"]|"")*") |
    # PostgreSQL E'...' strings also accept backslash escapes
    (?P<escape_string>(?<!\w)[Ee]'(?:[^'\\]|''|\\[\s\S])*') |
    (?P<squote>'(?:[^']|'')*') |
    (?P<dollar_quoted_string>\$(?P<dollar_quote_tag>[A-Za-z_]\w*|)\$[\s\S]*?\$(?P=dollar_quote_tag)\$) |
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    # Colon tokens that are not named placeholders
    (?P<pg_cast>::\w*) |
    (?P<assignment>:=) |
    (?P<positional_colon>:\d+) |
    # :name, not preceded by an identifier character (rules out slices like arr[lo:hi])
    (?P<named_colon>(?<!\w):(?P<colon_name>[A-Za-z_]\w*))
    """,
    re.VERBOSE,
)


@lru_cache(maxsize=PLACEHOLDER_CACHE_SIZE)
def _split_placeholders(sql: str) -> "tuple[tuple[Optional[str], str, int], ...]":
    """Split SQL into plain text and placeholder segments.

    Returns:
        ``(name, text, position)`` triples where ``name`` is ``None`` for plain text.
    """
    segments: list[tuple[Optional[str], str, int]] = []
    plain_start = 0
    for match in _PARAMETER_REGEX.finditer(sql):
        name = match.group("colon_name")
        if name is None:
            continue
        start = match.start("named_colon")
        if start > plain_start:
            segments.append((None, sql[plain_start:start], plain_start))
        segments.append((name, match.group("named_colon"), start))
        plain_start = match.end()
    if plain_start < len(sql):
        segments.append((None, sql[plain_start:], plain_start))
    return tuple(segments)


def _positional_marker(style: ParameterStyle, index: int) -> str:
    if style is ParameterStyle.QMARK:
        return "?"
    if style is ParameterStyle.NUMERIC:
        return f"${index}"
    if style is ParameterStyle.POSITIONAL_COLON:
        return f":{index}"
    return "%s"


class ParameterBinder:
    """Rewrites ``:name`` placeholders into a driver's positional style.

    With ``NAMED_COLON`` the text is kept as written, for drivers that bind ``:name`` natively; parameters are still
    validated and collected in placeholder order.

    Placeholder extraction is cached per SQL text; binding itself has no state, so one binder can be shared across
    threads.
    """

    __slots__ = ("style",)

    def __init__(self, style: ParameterStyle = ParameterStyle.NUMERIC) -> None:
        """Initialize binder.

        Args:
            style: Placeholder style of the target driver.

        Raises:
            ImproperConfigurationError: If ``style`` is not a known style.
        """
        try:
            style = ParameterStyle(style)
        except ValueError:
            msg = f"Unknown parameter style {style!r}"
            raise ImproperConfigurationError(msg) from None
        self.style = style

    def __repr__(self) -> str:
        return f"{type(self).__name__}(style={self.style!r})"

    def extract_parameters(self, sql: str) -> "list[ParameterInfo]":
        """List the placeholder occurrences in ``sql`` in textual order."""
        parameters: list[ParameterInfo] = []
        for name, text, position in _split_placeholders(sql):
            if name is None:
                continue
            parameters.append(
                ParameterInfo(
                    name=name,
                    style=ParameterStyle.NAMED_COLON,
                    position=position,
                    ordinal=len(parameters),
                    placeholder_text=text,
                )
            )
        return parameters

    def bind(self, sql: str, parameters: ParameterMapping = None) -> BoundStatement:
        """Bind named parameters into ``sql``.

        Args:
            sql: Template text with ``:name`` placeholders.
            parameters: Values by placeholder name. ``None`` behaves like an empty mapping.

        Raises:
            ParameterError: If ``parameters`` is not a mapping.
            MissingParameterError: If a placeholder has no entry in ``parameters``.

        Returns:
            The rewritten text with its ordered arguments.
        """
        if parameters is not None and not isinstance(parameters, Mapping):
            msg = f"Parameters must be a mapping of name to value, got {type(parameters).__name__}"
            raise ParameterError(msg, sql)

        segments = _split_placeholders(sql)
        names = tuple(name for name, _, _ in segments if name is not None)
        supplied: Mapping[str, Any] = parameters or {}

        missing = [name for name in dict.fromkeys(names) if name not in supplied]
        if missing:
            raise MissingParameterError(missing, sql)

        values = tuple(supplied[name] for name in names)
        if logger.isEnabledFor(logging.DEBUG):
            unused = sorted(set(supplied).difference(names))
            if unused:
                logger.debug("Ignoring unused parameters: %s", ", ".join(unused))

        if self.style is ParameterStyle.NAMED_COLON:
            return BoundStatement(sql, values, names, self.style)

        escape_percent = self.style is ParameterStyle.POSITIONAL_PYFORMAT
        pieces: list[str] = []
        index = 0
        for name, text, _ in segments:
            if name is None:
                pieces.append(text.replace("%", "%%") if escape_percent else text)
            else:
                index += 1
                pieces.append(_positional_marker(self.style, index))
        return BoundStatement("".join(pieces), values, names, self.style)


def bind(sql: str, parameters: ParameterMapping = None, style: ParameterStyle = ParameterStyle.NUMERIC) -> BoundStatement:
    """Bind named parameters into ``sql`` for a driver using ``style``.

    Shortcut for ``ParameterBinder(style).bind(sql, parameters)``.
    """
    return ParameterBinder(style).bind(sql, parameters)
