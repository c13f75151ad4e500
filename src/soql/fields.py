"""Field selection: SObject field catalog narrowed by an optional target schema."""

from __future__ import annotations

from collections.abc import Collection, Sequence


class IllegalInputError(ValueError):
    """Raised when no field is left to query for an SObject/schema pair."""


def select_fields(catalog: Sequence[str], schema: Collection[str] | None = None) -> list[str]:
    """Return the catalog fields to query, in catalog order.

    Without a schema every catalog field is selected. With a schema (any collection of field
    names, including a mapping keyed by name) only catalog fields present in it are kept.

    Raises:
        IllegalInputError: If the selection is empty, either because the catalog has no fields or
            because none of the schema fields is in the catalog.
    """

    if schema is None:
        if not catalog:
            raise IllegalInputError("SObject metadata has no queryable fields")
        return list(catalog)

    fields = [name for name in catalog if name in schema]
    if not fields:
        raise IllegalInputError(
            "None of the fields indicated in schema are present in sObject metadata. "
            f"Schema: '{sorted(schema)}'. SObject fields: '{list(catalog)}'"
        )
    return fields
