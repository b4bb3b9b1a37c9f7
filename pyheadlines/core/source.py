from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from pyheadlines.core.headline import Headline
from pyheadlines.utils.types import CategoryRef, CountryRef, HeadlineId, SourceRef


@runtime_checkable
class HeadlineSource(Protocol):
    """Contract between the repository and a backing headline store.

    Implementations own storage, ordering and filter evaluation. ``list``
    and ``search`` return records in a stable order that is consistent
    between calls; ``cursor`` means "strictly after the record with this id"
    in that order. Filter fields combine with AND, the refs inside one field
    with OR, and a field that is not passed imposes no constraint.

    Failures are reported with the typed errors from
    ``pyheadlines.utils.exceptions``:

    - ``list``: FetchFailure
    - ``get``: NotFoundFailure when the id is unknown, FetchFailure otherwise
    - ``create`` / ``update`` / ``delete``: CreateFailure / UpdateFailure /
      DeleteFailure
    - ``search``: SearchFailure
    """

    async def list(
        self,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
        categories: Iterable[CategoryRef] | None = None,
        sources: Iterable[SourceRef] | None = None,
        event_countries: Iterable[CountryRef] | None = None,
    ) -> list[Headline]: ...

    async def get(self, id: HeadlineId) -> Headline: ...

    async def create(self, headline: Headline) -> Headline: ...

    async def update(self, headline: Headline) -> Headline: ...

    async def delete(self, id: HeadlineId) -> None: ...

    async def search(
        self,
        query: str,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
    ) -> list[Headline]: ...
