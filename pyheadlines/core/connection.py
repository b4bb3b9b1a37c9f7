from __future__ import annotations

import logging
import re
from typing import Any

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from pyheadlines.utils.exceptions import NotConnected

logger = logging.getLogger(__name__)

_clients: dict[str, AsyncMongoClient] = {}
_databases: dict[str, AsyncDatabase] = {}


async def connect(uri: str, *, alias: str = "default", **client_kwargs: Any) -> AsyncDatabase:
    """Connect to a MongoDB instance and register the connection.

    The client connects lazily; nothing is sent to the server until the
    first operation.

    Args:
        uri: MongoDB connection URI (must include database name).
        alias: Connection alias for multi-database setups.
        **client_kwargs: Extra options for AsyncMongoClient
            (e.g. ``serverSelectionTimeoutMS``).

    Returns:
        The AsyncDatabase instance.

    Raises:
        ValueError: If URI format is invalid
    """
    logger.info(f"Connecting to MongoDB with alias '{alias}'")

    db_name = _extract_db_name(uri)
    try:
        client = AsyncMongoClient(uri, **client_kwargs)
    except Exception as e:
        logger.error(f"Failed to create MongoDB client for alias '{alias}': {e}")
        raise
    db = client[db_name]
    _clients[alias] = client
    _databases[alias] = db
    logger.info(f"Registered database '{db_name}' with alias '{alias}'")
    return db


async def disconnect(alias: str = "default") -> None:
    """Disconnect and remove a registered connection.

    Args:
        alias: Connection alias to disconnect
    """
    client = _clients.pop(alias, None)
    _databases.pop(alias, None)
    if client is not None:
        await client.close()
        logger.info(f"Disconnected from MongoDB (alias: '{alias}')")


async def ping(alias: str = "default") -> bool:
    """Check that the server behind ``alias`` answers.

    Raises:
        NotConnected: If no connection exists for the alias
    """
    db = get_database(alias)
    result = await db.command("ping")
    return bool(result.get("ok"))


def get_database(alias: str = "default") -> AsyncDatabase:
    """Retrieve a registered database or raise NotConnected.

    Raises:
        NotConnected: If no connection exists for the alias
    """
    try:
        return _databases[alias]
    except KeyError:
        raise NotConnected(
            f"No connection registered for alias '{alias}'. Call connect() first."
        ) from None


def get_client(alias: str = "default") -> AsyncMongoClient:
    """Retrieve a registered client or raise NotConnected.

    Raises:
        NotConnected: If no client exists for the alias
    """
    try:
        return _clients[alias]
    except KeyError:
        raise NotConnected(
            f"No client registered for alias '{alias}'. Call connect() first."
        ) from None


def _extract_db_name(uri: str) -> str:
    """Extract and validate the database name from a MongoDB URI.

    Raises:
        ValueError: If URI format is invalid or has no database name
    """
    if not uri:
        raise ValueError("MongoDB URI cannot be empty")

    path = uri.split("?")[0]
    if "://" not in path:
        raise ValueError(f"Invalid MongoDB URI '{uri}': missing scheme")

    hosts_and_path = path.split("://", 1)[1]
    if "/" not in hosts_and_path:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )
    db_name = hosts_and_path.rsplit("/", 1)[-1]

    if not db_name:
        raise ValueError(
            "Cannot extract database name from URI. "
            "Expected format: mongodb://host:port/database"
        )

    if not re.match(r"^[a-zA-Z0-9_-]+$", db_name):
        raise ValueError(
            f"Invalid database name '{db_name}'. "
            f"Database names can only contain letters, numbers, underscores, and hyphens."
        )

    logger.debug(f"Extracted database name: {db_name}")
    return db_name
