from pyheadlines.core.headline import Headline
from pyheadlines.core.source import HeadlineSource
from pyheadlines.core.polling import PollingStream, StreamState
from pyheadlines.core.repository import (
    HeadlinesRepository,
    Lookup,
    LookupKind,
    DEFAULT_POLL_INTERVAL,
)
from pyheadlines.core.connection import connect, disconnect, get_database, get_client, ping
from pyheadlines.core.mongo import MongoHeadlineSource

__all__ = [
    "Headline",
    "HeadlineSource",
    "PollingStream",
    "StreamState",
    "HeadlinesRepository",
    "Lookup",
    "LookupKind",
    "DEFAULT_POLL_INTERVAL",
    "connect",
    "disconnect",
    "get_database",
    "get_client",
    "ping",
    "MongoHeadlineSource",
]
