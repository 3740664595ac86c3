"""
Base source contract for registry plugins.

Sources MUST NOT: retry requests, cache results, or keep state between reads.

Sources ONLY: declare which options they support, and read them into a DataFrame.
"""

from abc import ABC, abstractmethod
from typing import Any

import pandas as pd


class BaseSource(ABC):
    """Contract for all DataFrame sources."""

    @abstractmethod
    def is_supported(self, options: Any) -> bool:
        """Return True if this source can read the given options."""
        pass

    @abstractmethod
    def read(self, options: Any) -> pd.DataFrame:
        """Load the options into a DataFrame. Raise on failure; never return partial frames."""
        pass
