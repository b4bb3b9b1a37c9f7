from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from bson import ObjectId

# Type aliases for better clarity
HeadlineId = str
CategoryRef = str
SourceRef = str
CountryRef = str
QueryDocument = dict[str, Any]
MongoId = ObjectId | str

# Record attribute checked by each filter field
FILTER_FIELDS = {
    "categories": "category",
    "sources": "source",
    "event_countries": "event_country",
}


def _freeze(refs: Iterable[str] | None) -> frozenset[str] | None:
    if refs is None:
        return None
    if isinstance(refs, str):
        return frozenset((refs,))
    return frozenset(refs)


@dataclass(frozen=True)
class FilterSpec:
    """Compound filter over categories, sources and event countries.

    Within one field membership is OR (match any ref in the set); across
    fields the combination is AND. ``None`` means the field imposes no
    constraint. An empty set is kept as-is and matches nothing.

    The filter is never evaluated while fetching: sources receive the fields
    unchanged and are responsible for honouring these semantics.
    """

    categories: frozenset[CategoryRef] | None = None
    sources: frozenset[SourceRef] | None = None
    event_countries: frozenset[CountryRef] | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of refs; store immutable sets
        for name in FILTER_FIELDS:
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in FILTER_FIELDS)

    def as_kwargs(self) -> dict[str, frozenset[str]]:
        """Return only the non-absent fields, keyed by source parameter name."""
        return {
            name: getattr(self, name)
            for name in FILTER_FIELDS
            if getattr(self, name) is not None
        }

    def matches(self, record: Any) -> bool:
        """Reference evaluation of the filter against a record."""
        for name, attribute in FILTER_FIELDS.items():
            refs = getattr(self, name)
            if refs is not None and getattr(record, attribute, None) not in refs:
                return False
        return True


def build_filter_query(
    filter: FilterSpec | None = None,
    cursor: HeadlineId | None = None,
) -> QueryDocument:
    """Translate a FilterSpec and cursor into a MongoDB filter document.

    Args:
        filter: Filter to translate; absent fields are omitted
        cursor: Exclusive lower bound on ``_id``

    Returns:
        Filter document combining every constraint with implicit AND
    """
    query: QueryDocument = {}
    if filter is not None:
        for name, refs in filter.as_kwargs().items():
            query[FILTER_FIELDS[name]] = {"$in": sorted(refs)}
    if cursor is not None:
        query["_id"] = {"$gt": to_mongo_id(cursor)}
    return query


def to_mongo_id(id: HeadlineId) -> MongoId:
    """Map a headline id to the ``_id`` value stored in MongoDB.

    Ids that are valid ObjectId hex strings are stored as ObjectIds, the
    MongoDB default; any other id is stored as the string itself. Range
    operators only compare values of the same BSON type, so queries must
    use the same mapping as writes.
    """
    if isinstance(id, str) and ObjectId.is_valid(id):
        return ObjectId(id)
    return id
