"""Request parameters shared by the record, auth and file endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import quote_plus


@dataclass(frozen=True, slots=True)
class Params:
    """Everything one API call may need.

    Only ``page``, ``per_page``, ``sort``, ``filter``, ``expand``, ``fields`` and
    ``skip_total`` end up in the query string. None of the fields are validated
    here; the server enforces its own limits (e.g. at most 6 levels of
    ``expand`` nesting).
    """

    # Auth token. Empty means unauthenticated (public records and files only).
    token: str = ""
    collection: str = ""
    # Request body for create/update.
    data: Any = None
    # Record id for view/update/delete and file access.
    id: str = ""
    file_name: str = ""
    # 0 leaves the server default in place.
    page: int = 0
    per_page: int = 0
    # Comma separated, "-" prefix for DESC, e.g. "-created,id".
    sort: str = ""
    # Filter expression, e.g. "(id='abc' && created>'2022-01-01')".
    filter: str = ""
    # Relations to expand, e.g. "relField1,relField2.subRelField".
    expand: str = ""
    # Fields to return, e.g. "*,description:excerpt(200,true)".
    fields: str = ""
    # Skip the total count query; totals come back as -1.
    skip_total: bool = False
    # Image thumb size, e.g. "100x300", "100x300t", "0x300".
    thumb: str = ""

    def query_string(self) -> str:
        """Render the list/view query parameters in a fixed order.

        Only ``filter`` is percent-encoded; the other values are emitted as is.
        """
        pairs: list[str] = []
        if self.page > 0:
            pairs.append(f"page={self.page}")
        if self.per_page > 0:
            pairs.append(f"perPage={self.per_page}")
        if self.sort:
            pairs.append(f"sort={self.sort}")
        if self.filter:
            pairs.append(f"filter={quote_plus(self.filter)}")
        if self.expand:
            pairs.append(f"expand={self.expand}")
        if self.fields:
            pairs.append(f"fields={self.fields}")
        if self.skip_total:
            pairs.append("skipTotal=true")
        return "&".join(pairs)
