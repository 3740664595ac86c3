"""
Source registry: dispatch request options to the first source that supports them.

Sources are registered as instances (they hold credentials and a base url).
Registering a second instance of the same class replaces the first.
"""

from typing import Any, List, Optional

import pandas as pd

from quandl_app.ingestion.core.base_source import BaseSource
from quandl_app.utils.logger import logger


class UnsupportedOptionsError(LookupError):
    """Raised when no registered source supports the options."""

    pass


class SourceRegistry:
    """Ordered collection of sources. Caller reads via registry.read(options)."""

    def __init__(self) -> None:
        self._sources: List[BaseSource] = []

    def register(self, source: BaseSource) -> None:
        """Register a source, replacing any registered source of the same class."""
        self._sources = [s for s in self._sources if type(s) is not type(source)]
        self._sources.append(source)
        logger.debug("Registered source {}", type(source).__name__)

    def get(self, options: Any) -> Optional[BaseSource]:
        """Return the first source supporting options, or None."""
        for source in self._sources:
            if source.is_supported(options):
                return source
        return None

    def read(self, options: Any) -> pd.DataFrame:
        source = self.get(options)
        if source is None:
            raise UnsupportedOptionsError(
                f"No source registered for options of type {type(options).__name__}"
            )
        return source.read(options)

    def sources(self) -> list[BaseSource]:
        """Return all registered sources."""
        return list(self._sources)


# Singleton shared by the client facade and the API.
registry = SourceRegistry()
