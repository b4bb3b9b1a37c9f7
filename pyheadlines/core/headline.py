from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Optional, Self

from pydantic import BaseModel

from pyheadlines.utils.settings import SettingsResolver
from pyheadlines.utils.types import QueryDocument, to_mongo_id


class Headline(BaseModel):
    """A news headline.

    Only ``id`` matters to pagination: it is the stable, unique key used as
    the page cursor. ``category``, ``source`` and ``event_country`` hold the
    refs that FilterSpec fields are matched against.
    """

    model_config = {"frozen": True}

    id: Optional[str] = None
    title: str
    description: Optional[str] = None
    url: Optional[str] = None
    image_url: Optional[str] = None
    published_at: Optional[datetime] = None
    category: Optional[str] = None
    source: Optional[str] = None
    event_country: Optional[str] = None

    # ClassVars, set by __init_subclass__
    _collection_name: ClassVar[str] = "headlines"
    _connection_alias: ClassVar[str] = "default"
    _search_fields: ClassVar[list[str]] = ["title", "description"]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._collection_name = SettingsResolver.get_collection_name(cls)
        cls._connection_alias = SettingsResolver.get_connection_alias(cls)
        cls._search_fields = SettingsResolver.get_search_fields(cls)

    # --- Serialization ---

    def to_mongo(self) -> QueryDocument:
        """Convert the headline to a MongoDB document keyed by ``_id``."""
        data = self.model_dump(mode="python")
        id = data.pop("id")
        if id is not None:
            data["_id"] = to_mongo_id(id)
        return data

    @classmethod
    def from_mongo(cls, data: QueryDocument) -> Self:
        """Create a headline from a MongoDB document."""
        data = dict(data)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)
