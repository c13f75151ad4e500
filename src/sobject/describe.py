"""SObject describe clients.

A describer returns the ordered list of queryable field names of an SObject. Compound fields
(addresses, geolocations) cannot be selected through the Bulk API, so they are replaced by their
leaf fields, which Salesforce already lists individually with `compoundFieldName` set.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

logger = logging.getLogger(__name__)

COMPOUND_FIELD_TYPES: frozenset[str] = frozenset({"address", "location"})


class DescribeError(RuntimeError):
    """Raised when SObject metadata cannot be retrieved."""


class SObjectDescriber(Protocol):
    """Anything that can list the queryable fields of an SObject."""

    def describe(self, object_name: str) -> list[str]:
        """Return field names in metadata order, compound fields flattened."""
        ...


def flatten_compound_fields(
        fields: Sequence[Mapping[str, Any]],
        compound_types: frozenset[str] = COMPOUND_FIELD_TYPES,
) -> list[str]:
    """Drop compound fields from a describe `fields` payload, keeping their leaves."""

    return [f["name"] for f in fields if f.get("type") not in compound_types]


@dataclass(frozen=True)
class RestDescribeClient:
    """Describe SObjects through the Salesforce REST API."""

    instance_url: str
    access_token: str
    api_version: str = "45.0"
    timeout_s: float = 30.0
    compound_types: frozenset[str] = COMPOUND_FIELD_TYPES

    def _describe_url(self, object_name: str) -> str:
        return (
            f"{self.instance_url.rstrip('/')}/services/data/v{self.api_version}"
            f"/sobjects/{quote(object_name, safe='')}/describe/"
        )

    def describe(self, object_name: str) -> list[str]:
        """Fetch and flatten the field list of `object_name`.

        Raises:
            DescribeError: On HTTP/connection failures or an unexpected payload.
        """

        req = Request(
            self._describe_url(object_name),
            method="GET",
            headers={
                "Authorization": f"Bearer {self.access_token}",
                "Accept": "application/json",
            },
        )

        try:
            with urlopen(req, timeout=self.timeout_s) as resp:  # noqa: S310
                body = resp.read()
        except HTTPError as exc:
            logger.warning("describe failed object=%s status=%s", object_name, exc.code)
            raise DescribeError(f"Describe HTTP error: {exc.code}") from exc
        except URLError as exc:
            logger.warning("describe failed object=%s reason=%s", object_name, exc.reason)
            raise DescribeError("Describe connection error") from exc

        try:
            fields = json.loads(body)["fields"]
            return flatten_compound_fields(fields, self.compound_types)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise DescribeError("Unexpected describe response format") from exc


@dataclass(frozen=True)
class StaticDescriber:
    """In-memory describer backed by a fixed catalog per SObject."""

    catalogs: Mapping[str, Sequence[str]] = field(default_factory=dict)

    def describe(self, object_name: str) -> list[str]:
        """Return the configured catalog or raise `DescribeError` for unknown objects."""

        try:
            return list(self.catalogs[object_name])
        except KeyError as exc:
            raise DescribeError(f"Unknown SObject: {object_name}") from exc
