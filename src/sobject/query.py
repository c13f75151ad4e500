"""SObject query generation (describe -> field selection -> filter -> SOQL)."""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import datetime

from src.filters.resolver import resolve_filter
from src.filters.schema import FilterProperties
from src.sobject.describe import DescribeError, SObjectDescriber
from src.soql.builder import DEFAULT_TIMESTAMP_FIELD, build_soql
from src.soql.fields import select_fields

logger = logging.getLogger(__name__)


class SObjectConnectionError(RuntimeError):
    """Raised when the SObject cannot be described; the run must be aborted."""


def build_query(
        object_name: str,
        schema: Collection[str] | None,
        run_start_time: datetime | int,
        *,
        filters: FilterProperties,
        describer: SObjectDescriber,
        timestamp_field: str = DEFAULT_TIMESTAMP_FIELD,
) -> str:
    """Generate the SOQL query for one SObject and one run.

    Only fields present in `schema` are selected (all fields when `schema` is None), which avoids
    pulling columns the pipeline does not need.

    Raises:
        SObjectConnectionError: If the describe call fails.
        IllegalInputError: If no field is left to query.
        RangeSpecError: If the range window falls outside the representable date range.
    """

    try:
        catalog = describer.describe(object_name)
    except DescribeError as exc:
        raise SObjectConnectionError(
            f"Cannot establish connection to Salesforce to describe SObject: '{object_name}'"
        ) from exc

    fields = select_fields(catalog, schema)
    descriptor = resolve_filter(filters, run_start_time)
    query = build_soql(fields, object_name, descriptor, timestamp_field=timestamp_field)

    logger.debug("Generated SObject query: '%s'", query)
    return query
