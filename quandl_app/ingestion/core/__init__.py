# ingestion core: base_source, registry

from quandl_app.ingestion.core.base_source import BaseSource
from quandl_app.ingestion.core.registry import (
    SourceRegistry,
    UnsupportedOptionsError,
    registry,
)

__all__ = ["BaseSource", "SourceRegistry", "UnsupportedOptionsError", "registry"]
