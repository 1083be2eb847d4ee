"""Settings for building a data access layer."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

from sqldal.exceptions import ImproperConfigurationError
from sqldal.parameters import ParameterStyle
from sqldal.storage import LocalFileProvider, load_files
from sqldal.utils.logging import get_logger

if TYPE_CHECKING:
    from sqldal.protocols import FileProviderProtocol

__all__ = ("DALConfig",)

logger = get_logger("config")

DEFAULT_ENV_PREFIX = "SQLDAL_"
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"Invalid boolean value {value!r} for {name}"
    raise ImproperConfigurationError(msg)


def _parse_style(value: "Union[str, ParameterStyle]") -> ParameterStyle:
    try:
        style = ParameterStyle(value)
    except ValueError:
        options = ", ".join(option.value for option in ParameterStyle)
        msg = f"Invalid parameter style {value!r}; expected one of: {options}"
        raise ImproperConfigurationError(msg) from None
    return style


@dataclass
class DALConfig:
    """Where templates live and how they are bound.

    Attributes:
        sql_root: Directory holding SQL templates. ``None`` leaves the layer without a file provider.
        pattern: Glob selecting template files under ``sql_root``.
        parameter_style: Placeholder style to bind into. ``None`` uses the database handle's style.
        encoding: Encoding of template files.
        preload: Read every template into memory up front instead of reading from disk per call.
    """

    sql_root: "Optional[Union[str, Path]]" = None
    pattern: str = "**/*.sql"
    parameter_style: "Optional[ParameterStyle]" = None
    encoding: str = "utf-8"
    preload: bool = True
    extra: "dict[str, str]" = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.parameter_style is not None:
            self.parameter_style = _parse_style(self.parameter_style)
        if not self.pattern:
            msg = "Template pattern cannot be empty"
            raise ImproperConfigurationError(msg)

    @classmethod
    def from_env(cls, prefix: str = DEFAULT_ENV_PREFIX, environ: "Optional[Mapping[str, str]]" = None) -> "DALConfig":
        """Build a config from environment variables.

        Reads ``<prefix>SQL_ROOT``, ``<prefix>PATTERN``, ``<prefix>PARAMETER_STYLE``, ``<prefix>ENCODING`` and
        ``<prefix>PRELOAD``. Other variables with the prefix are kept in ``extra``.

        Args:
            prefix: Variable name prefix.
            environ: Mapping to read instead of :data:`os.environ`.

        Raises:
            ImproperConfigurationError: If a variable holds an invalid value.

        Returns:
            The config.
        """
        env = os.environ if environ is None else environ
        values = {key[len(prefix) :]: value for key, value in env.items() if key.startswith(prefix)}

        sql_root = values.pop("SQL_ROOT", None) or None
        pattern = values.pop("PATTERN", None) or "**/*.sql"
        style = values.pop("PARAMETER_STYLE", None)
        encoding = values.pop("ENCODING", None) or "utf-8"
        preload_value = values.pop("PRELOAD", None)
        preload = True if preload_value is None else _parse_bool(f"{prefix}PRELOAD", preload_value)

        return cls(
            sql_root=sql_root,
            pattern=pattern,
            parameter_style=_parse_style(style) if style else None,
            encoding=encoding,
            preload=preload,
            extra=values,
        )

    def create_file_provider(self) -> "Optional[FileProviderProtocol]":
        """Build the file provider described by this config.

        Raises:
            ImproperConfigurationError: If ``sql_root`` is set but is not a directory.

        Returns:
            The provider, or ``None`` when ``sql_root`` is unset.
        """
        if self.sql_root is None:
            logger.debug("No SQL root configured; templates cannot be resolved")
            return None
        if self.preload:
            return load_files(self.sql_root, self.pattern)
        return LocalFileProvider(self.sql_root, self.pattern)
