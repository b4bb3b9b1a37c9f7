from __future__ import annotations

import re
from typing import Iterable

from bson import ObjectId
from pymongo import ASCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from pyheadlines.core.connection import get_database
from pyheadlines.core.headline import Headline
from pyheadlines.utils.exceptions import (
    CreateFailure,
    DeleteFailure,
    FetchFailure,
    NotFoundFailure,
    SearchFailure,
    UpdateFailure,
)
from pyheadlines.utils.types import (
    FilterSpec,
    HeadlineId,
    QueryDocument,
    build_filter_query,
    to_mongo_id,
)


class MongoHeadlineSource:
    """HeadlineSource backed by a MongoDB collection.

    Headlines are ordered by ``_id`` ascending, which is also the cursor
    order. Ids that are ObjectId hex strings are stored as ObjectIds, other
    ids as strings; keep to one kind per collection, since a cursor only
    pages through ids of its own BSON type. The collection and connection
    alias come from the model's inner ``Settings`` class.
    """

    def __init__(self, model: type[Headline] = Headline) -> None:
        self._model = model

    def get_collection(self) -> AsyncCollection:
        """Get the MongoDB collection for the headline model."""
        db = get_database(self._model._connection_alias)
        return db[self._model._collection_name]

    async def _find(self, query: QueryDocument, limit: int | None) -> list[Headline]:
        cursor = self.get_collection().find(query).sort("_id", ASCENDING)
        if limit:
            cursor = cursor.limit(limit)
        return [self._model.from_mongo(raw) async for raw in cursor]

    async def list(
        self,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
        categories: Iterable[str] | None = None,
        sources: Iterable[str] | None = None,
        event_countries: Iterable[str] | None = None,
    ) -> list[Headline]:
        filter = FilterSpec(
            categories=categories,
            sources=sources,
            event_countries=event_countries,
        )
        try:
            return await self._find(build_filter_query(filter, cursor), limit)
        except PyMongoError as e:
            raise FetchFailure(f"Failed to list headlines: {e}") from e

    async def get(self, id: HeadlineId) -> Headline:
        try:
            data = await self.get_collection().find_one({"_id": to_mongo_id(id)})
        except PyMongoError as e:
            raise FetchFailure(f"Failed to fetch headline '{id}': {e}") from e
        if data is None:
            raise NotFoundFailure(f"Headline with id '{id}' not found")
        return self._model.from_mongo(data)

    async def create(self, headline: Headline) -> Headline:
        if headline.id is None:
            headline = headline.model_copy(update={"id": str(ObjectId())})
        try:
            await self.get_collection().insert_one(headline.to_mongo())
        except DuplicateKeyError as e:
            raise CreateFailure(f"Headline with id '{headline.id}' already exists") from e
        except PyMongoError as e:
            raise CreateFailure(f"Failed to create headline: {e}") from e
        return headline

    async def update(self, headline: Headline) -> Headline:
        if headline.id is None:
            raise UpdateFailure("Cannot update a headline without an id")
        try:
            result = await self.get_collection().replace_one(
                {"_id": to_mongo_id(headline.id)}, headline.to_mongo()
            )
        except PyMongoError as e:
            raise UpdateFailure(f"Failed to update headline '{headline.id}': {e}") from e
        if result.matched_count == 0:
            raise UpdateFailure(f"Headline with id '{headline.id}' not found")
        return headline

    async def delete(self, id: HeadlineId) -> None:
        try:
            result = await self.get_collection().delete_one({"_id": to_mongo_id(id)})
        except PyMongoError as e:
            raise DeleteFailure(f"Failed to delete headline '{id}': {e}") from e
        if result.deleted_count == 0:
            raise DeleteFailure(f"Headline with id '{id}' not found")

    async def search(
        self,
        query: str,
        *,
        limit: int | None = None,
        cursor: HeadlineId | None = None,
    ) -> list[Headline]:
        pattern = {"$regex": re.escape(query), "$options": "i"}
        search_query = build_filter_query(cursor=cursor)
        search_query["$or"] = [{field: pattern} for field in self._model._search_fields]
        try:
            return await self._find(search_query, limit)
        except PyMongoError as e:
            raise SearchFailure(f"Failed to search headlines: {e}") from e

    async def ensure_indexes(self) -> list[str]:
        """Create indexes backing the filter fields. Returns index names."""
        collection = self.get_collection()
        names = []
        for field in ("category", "source", "event_country"):
            names.append(await collection.create_index([(field, ASCENDING), ("_id", ASCENDING)]))
        return names
