"""Query commands: build a query body, or build and send it."""

from typing import Annotated, Optional

import typer

from igq.api.query import (
    ALL_FIELDS,
    DEFAULT_LIMIT,
    QueryBuilder,
    parse_sort,
    parse_where,
    parse_where_in,
)
from igq.models.errors import handle_error, ExitCode
from igq.output import format_output, OutputFormat


def _client(require_key: bool = True):
    from igq.cli import get_client
    return get_client(require_key=require_key)


def _output():
    from igq.cli import get_output_format
    return get_output_format()


FieldOpt = Annotated[
    Optional[list[str]],
    typer.Option("-f", "--field", help="Field to select (repeatable, '*' for all)"),
]
WhereOpt = Annotated[
    Optional[list[str]],
    typer.Option("-w", "--where", help="Filter as key=value, key>value or key<value (repeatable)"),
]
WhereInOpt = Annotated[
    Optional[list[str]],
    typer.Option("--where-in", help="Membership filter as key=v1,v2,... (repeatable)"),
]
SearchOpt = Annotated[Optional[str], typer.Option("-s", "--search", help="Free-text search")]
SortOpt = Annotated[Optional[str], typer.Option("--sort", help="Sort as field or field:asc|desc")]
LimitOpt = Annotated[int, typer.Option("-l", "--limit", min=0, help="Maximum results")]


def build_query(
    fields: Optional[list[str]] = None,
    where: Optional[list[str]] = None,
    where_in: Optional[list[str]] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    limit: int = DEFAULT_LIMIT,
) -> QueryBuilder:
    """Translate CLI options into a QueryBuilder.

    Without any field, all fields are requested. Malformed filters or sort
    expressions exit with a validation error.
    """
    builder = QueryBuilder()

    if not fields or ALL_FIELDS in fields:
        builder.all_fields()
    else:
        builder.add_fields(fields)

    try:
        for expression in where or []:
            key, equality, value = parse_where(expression)
            builder.add_where(key, equality, value)
        for expression in where_in or []:
            key, values = parse_where_in(expression)
            builder.add_where_in(key, values)
        if sort:
            builder.sort_by(*parse_sort(sort))
    except ValueError as e:
        handle_error(ExitCode.VALIDATION_ERROR, str(e))

    if search:
        builder.search(search)

    return builder.limit(limit)


def _mask(api_key: str) -> str:
    return api_key[:4] + "..." if len(api_key) > 8 else "***"


def body(
    field: FieldOpt = None,
    where: WhereOpt = None,
    where_in: WhereInOpt = None,
    search: SearchOpt = None,
    sort: SortOpt = None,
    limit: LimitOpt = DEFAULT_LIMIT,
):
    """Print the query body without sending it."""
    builder = build_query(field, where, where_in, search, sort, limit)
    typer.echo(str(builder))


def run(
    endpoint: Annotated[str, typer.Argument(help="API endpoint (games, companies, ...)")],
    field: FieldOpt = None,
    where: WhereOpt = None,
    where_in: WhereInOpt = None,
    search: SearchOpt = None,
    sort: SortOpt = None,
    limit: LimitOpt = DEFAULT_LIMIT,
    columns: Annotated[
        Optional[str],
        typer.Option("--columns", help="Comma-separated columns for table/csv output"),
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the request instead of sending it")
    ] = False,
    output: Annotated[Optional[OutputFormat], typer.Option("-o")] = None,
):
    """Build a query and send it to an endpoint."""
    fmt = output or _output()
    builder = build_query(field, where, where_in, search, sort, limit)
    client = _client(require_key=not dry_run)

    if dry_run:
        request = client.prepare(endpoint, builder)
        format_output(
            {
                "method": request.method,
                "url": str(request.url),
                "headers": {
                    "user-key": _mask(client.api_key),
                    "content-type": request.headers["content-type"],
                },
                "body": request.content.decode("utf-8"),
            },
            fmt,
        )
        return

    result = client.query(endpoint, builder)
    cols = [c.strip() for c in columns.split(",") if c.strip()] if columns else None
    format_output(result, fmt, columns=cols)
