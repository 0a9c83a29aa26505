"""Query builder for the IGDB query language."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

import httpx

logger = logging.getLogger(__name__)

ALL_FIELDS = "*"
DEFAULT_LIMIT = 50


class OrderBy(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"

    def __str__(self) -> str:
        return self.value


class Equality(str, Enum):
    EQUAL = "="
    GREATER = ">"
    LOWER = "<"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Filter:
    """One predicate clause: ``<key> <symbol> <value>``.

    Where-in filters carry an empty symbol; their value already holds the
    operator and the value list.
    """

    key: str
    symbol: str
    value: str

    def render(self) -> str:
        return f"{self.key} {self.symbol} {self.value}"


class QueryBuilder:
    """Fluent accumulator for a single query.

    Every mutator returns the builder so calls can be chained. Nothing is
    validated: field names, values and duplicates are taken verbatim.

    Example:
        >>> QueryBuilder().add_field("name").add_where("id", Equality.LOWER, 10).build_body()
        b'fields name; where id < 10; limit 50;'
    """

    def __init__(self):
        self.fields: list[str] = []
        self.filters: list[Filter] = []
        self.sort: tuple[str, str] = ("", "")
        self._limit: int = DEFAULT_LIMIT
        self._search: str = ""

    def all_fields(self) -> "QueryBuilder":
        self.fields = [ALL_FIELDS]
        return self

    def add_field(self, name: str) -> "QueryBuilder":
        self.fields.append(str(name))
        return self

    def add_fields(self, names: Iterable[str]) -> "QueryBuilder":
        self.fields.extend(str(name) for name in names)
        return self

    def add_where_in(self, field: str, values: Iterable[Any]) -> "QueryBuilder":
        """Filter on membership, rendered as ``field  = (v1,v2,...)``."""
        joined = ",".join(str(v) for v in values)
        self.filters.append(Filter(key=field, symbol="", value=f"= ({joined})"))
        return self

    def add_where(self, field: str, equality: Equality, value: Any) -> "QueryBuilder":
        self.filters.append(Filter(key=field, symbol=str(equality), value=str(value)))
        return self

    def limit(self, limit: int) -> "QueryBuilder":
        """Set the result count. Must be non-negative; rendered as given."""
        self._limit = limit
        return self

    def search(self, text: str) -> "QueryBuilder":
        self._search = text
        return self

    def sort_by(self, field: str, order: OrderBy) -> "QueryBuilder":
        self.sort = (field, str(order))
        return self

    @property
    def limit_value(self) -> int:
        return self._limit

    @property
    def search_text(self) -> str:
        return self._search

    def build_body(self) -> bytes:
        """Serialize the accumulated state to the wire body."""
        body = render_body(self)
        logger.debug("query body: %s", body)
        return body.encode("utf-8")

    def build(self, api_key: str, url: str) -> httpx.Request:
        """Wrap the serialized body into an outgoing GET request."""
        from igq.api.client import assemble_request

        return assemble_request(api_key, url, self.build_body())

    def __str__(self) -> str:
        return render_body(self)

    def __repr__(self) -> str:
        return f"QueryBuilder({render_body(self)!r})"


def render_body(builder: QueryBuilder) -> str:
    """Render builder state as a query string.

    Clauses appear in a fixed order: fields, search, where, sort, limit.
    Filters are rendered newest first. The limit clause is always present
    and closes the query.
    """
    parts = [f"fields {','.join(builder.fields)};"]

    if builder.search_text:
        parts.append(f' search "{builder.search_text}";')

    if builder.filters:
        clause = " & ".join(f.render() for f in reversed(builder.filters))
        parts.append(f" where {clause};")

    sort_field, direction = builder.sort
    if sort_field:
        parts.append(f" sort {sort_field} {direction}")

    parts.append(f" limit {builder.limit_value};")

    return "".join(parts)


def parse_where(expression: str) -> tuple[str, Equality, str]:
    """Split ``key<op>value`` into its parts.

    The first ``=``, ``>`` or ``<`` in the expression is the operator.

    Raises:
        ValueError: if no operator is present or the key is empty.
    """
    for i, char in enumerate(expression):
        if char in ("=", ">", "<"):
            key = expression[:i].strip()
            if not key:
                raise ValueError(f"Missing field name in filter: {expression!r}")
            return key, Equality(char), expression[i + 1:].strip()
    raise ValueError(f"No operator (=, >, <) in filter: {expression!r}")


def parse_where_in(expression: str) -> tuple[str, list[str]]:
    """Split ``key=v1,v2,...`` into a field and its value list."""
    key, sep, values = expression.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"Expected key=v1,v2,... but got: {expression!r}")
    return key, [v.strip() for v in values.split(",") if v.strip()]


def parse_sort(expression: str) -> tuple[str, OrderBy]:
    """Parse ``field`` or ``field:asc|desc``. Direction defaults to ascending."""
    field, _, direction = expression.partition(":")
    field = field.strip()
    if not field:
        raise ValueError(f"Missing sort field: {expression!r}")
    direction = direction.strip().lower() or OrderBy.ASCENDING.value
    try:
        return field, OrderBy(direction)
    except ValueError:
        raise ValueError(
            f"Sort direction must be 'asc' or 'desc', got {direction!r}"
        ) from None
