"""Settings resolution utilities for record model configuration."""

from __future__ import annotations


def _pluralize(name: str) -> str:
    """Naive pluralization for collection names.

    Args:
        name: Singular class name

    Returns:
        Pluralized collection name
    """
    lower = name.lower()
    if lower.endswith("s"):
        return lower + "es"
    if lower.endswith("y") and not lower.endswith(("ay", "ey", "iy", "oy", "uy")):
        return lower[:-1] + "ies"
    return lower + "s"


class SettingsResolver:
    """Resolves storage settings from a model's inner Settings class."""

    @staticmethod
    def get_collection_name(cls: type) -> str:
        """Get collection name from Settings or auto-pluralize.

        Args:
            cls: Record model class

        Returns:
            Collection name
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "collection"):
            return settings.collection
        return _pluralize(cls.__name__)

    @staticmethod
    def get_connection_alias(cls: type) -> str:
        """Get connection alias from Settings or default.

        Args:
            cls: Record model class

        Returns:
            Connection alias name
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "connection_alias"):
            return settings.connection_alias
        return "default"

    @staticmethod
    def get_search_fields(cls: type) -> list[str]:
        """Get the fields matched by text search.

        Args:
            cls: Record model class

        Returns:
            List of field names searched, ``title`` and ``description``
            when unset
        """
        settings = getattr(cls, "Settings", None)
        if settings and hasattr(settings, "search_fields"):
            return list(settings.search_fields)
        return ["title", "description"]
