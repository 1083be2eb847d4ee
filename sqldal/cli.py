import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from sqldal.utils.serializers import from_json

if TYPE_CHECKING:
    from click import Group
    from rich.console import Console

    from sqldal.driver.result import Rows

__all__ = ("get_sqldal_group", "parse_params", "run_cli")


def parse_params(items: "Sequence[str]") -> "dict[str, Any]":
    """Parse ``key=value`` and ``key:=json`` command line parameters.

    Args:
        items: Raw ``--param`` values.

    Raises:
        ValueError: If an item has no ``=`` or holds invalid JSON.

    Returns:
        Parameters by name.
    """
    params: dict[str, Any] = {}
    for item in items:
        key, sep, value = item.partition("=")
        if not sep or not key:
            msg = f"Invalid parameter {item!r}; expected key=value or key:=json"
            raise ValueError(msg)
        if key.endswith(":"):
            params[key[:-1]] = from_json(value)
        else:
            params[key] = value
    return params


def _print_rows(console: "Console", rows: "Rows") -> None:
    from rich.table import Table

    if not rows.column_names:
        console.print(f"[green]{rows.rowcount} row(s) affected[/]")
        return
    table = Table(*rows.column_names)
    for record in rows:
        table.add_row(*("NULL" if value is None else str(value) for value in record))
    console.print(table)
    console.print(f"[dim]{len(rows)} row(s)[/]")


def get_sqldal_group() -> "Group":
    """Get the sqldal CLI group.

    Raises:
        MissingDependencyError: If the `rich-click` package is not installed.

    Returns:
        The sqldal CLI group.
    """
    from sqldal.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError as e:
        raise MissingDependencyError(package="rich-click", install_package="cli") from e

    from rich import get_console
    from rich.markup import escape

    from sqldal.base import DataAccessLayer
    from sqldal.config import DALConfig
    from sqldal.driver.dbapi import sqlite_handle
    from sqldal.driver.result import Rows
    from sqldal.exceptions import SQLDalError
    from sqldal.loader import TemplateStore
    from sqldal.parameters import ParameterBinder, ParameterStyle
    from sqldal.utils.logging import LOG_LEVELS, configure_logging

    style_choices = [style.value for style in ParameterStyle]
    param_option = click.option(
        "-p",
        "--param",
        "params",
        multiple=True,
        help="Template parameter as key=value (text) or key:=json (typed value). Repeatable.",
    )

    def _params(raw: "Sequence[str]") -> "dict[str, Any]":
        try:
            return parse_params(raw)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--param") from e

    @click.group(name="sqldal")
    @click.option(
        "--root",
        envvar="SQLDAL_SQL_ROOT",
        type=click.Path(file_okay=False, path_type=Path),
        help="Directory holding SQL templates.",
    )
    @click.option("--pattern", default="**/*.sql", show_default=True, help="Glob selecting template files.")
    @click.option(
        "--log-level",
        type=click.Choice(LOG_LEVELS, case_sensitive=False),
        default="WARNING",
        show_default=True,
        help="Log level for sqldal loggers.",
    )
    @click.pass_context
    def sqldal_group(ctx: "click.Context", root: Optional[Path], pattern: str, log_level: str) -> None:
        """Run and inspect named SQL templates."""
        configure_logging(level=log_level, format_style="simple")
        ctx.ensure_object(dict)
        ctx.obj["config"] = DALConfig(sql_root=root, pattern=pattern, preload=False)

    def _provider(ctx: "click.Context") -> Any:
        console = get_console()
        try:
            return ctx.obj["config"].create_file_provider()
        except SQLDalError as e:
            console.print(f"[red]{escape(str(e))}[/]", highlight=False)
            ctx.exit(1)

    @sqldal_group.command(name="list")
    @click.pass_context
    def list_templates(ctx: "click.Context") -> None:
        """List available SQL templates."""
        console = get_console()
        try:
            names = TemplateStore(_provider(ctx)).list_templates()
        except SQLDalError as e:
            console.print(f"[red]{escape(str(e))}[/]", highlight=False)
            ctx.exit(1)
        if not names:
            console.print("[yellow]No SQL templates found[/]")
            return
        for name in names:
            console.print(name, markup=False, highlight=False)

    @sqldal_group.command(name="render")
    @click.argument("name")
    @param_option
    @click.option(
        "--style", type=click.Choice(style_choices), default=ParameterStyle.NUMERIC.value, show_default=True
    )
    @click.option("--pretty", is_flag=True, help="Reformat the SQL with sqlglot.")
    @click.pass_context
    def render(ctx: "click.Context", name: str, params: "tuple[str, ...]", style: str, pretty: bool) -> None:
        """Show the positional SQL and ordered arguments for a template."""
        import sqlglot
        from sqlglot.errors import SqlglotError

        console = get_console()
        values = _params(params)
        try:
            sql = TemplateStore(_provider(ctx)).load_text(name)
            bound = ParameterBinder(ParameterStyle(style)).bind(sql, values)
        except SQLDalError as e:
            console.print(f"[red]{escape(str(e))}[/]", highlight=False)
            ctx.exit(1)

        text = bound.sql
        if pretty:
            try:
                text = ";\n".join(sqlglot.transpile(text, pretty=True))
            except SqlglotError as e:
                console.print(f"[yellow]Could not reformat SQL: {escape(str(e))}[/]", highlight=False)
        console.print(text, markup=False, highlight=False, soft_wrap=True)
        for index, (param_name, value) in enumerate(zip(bound.parameter_names, bound.parameters), start=1):
            console.print(f"{index}: {param_name} = {value!r}", markup=False, highlight=False, soft_wrap=True)

    @sqldal_group.command(name="query")
    @click.argument("name")
    @param_option
    @click.option(
        "--database", required=True, type=click.Path(dir_okay=False, path_type=Path), help="SQLite database file."
    )
    @click.option("--one", is_flag=True, help="Fetch a single row.")
    @click.pass_context
    def query(ctx: "click.Context", name: str, params: "tuple[str, ...]", database: Path, one: bool) -> None:
        """Run a template against a SQLite database."""
        console = get_console()
        values = _params(params)
        connection = sqlite3.connect(str(database))
        try:
            dal = DataAccessLayer(sqlite_handle(connection, autocommit=True), _provider(ctx))
            if one:
                row = dal.query_row(name, values)
                records = [] if row.is_empty else [row.one()]
                _print_rows(console, Rows(records, row.column_names, row.rowcount))
            else:
                with dal.query(name, values) as rows:
                    _print_rows(console, rows)
        except SQLDalError as e:
            console.print(f"[red]{escape(str(e))}[/]", highlight=False)
            ctx.exit(1)
        finally:
            connection.close()

    return sqldal_group


def run_cli() -> None:
    """Entry point for the ``sqldal`` console script."""
    get_sqldal_group()()
