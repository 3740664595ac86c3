"""
Controlled vocabulary for Quandl catalog columns.

Provider column names vary between endpoints (``database_code`` vs
``databasecode``), so every catalog frame is remapped through this table.
Unmapped names are a hard failure: a new provider column needs an entry here.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from quandl_app.ingestion.quandl.exceptions import UnknownFieldError


class QuandlField(str, Enum):
    NAME = "NAME"
    DESCRIPTION = "DESCRIPTION"
    DATABASE_CODE = "DATABASE_CODE"
    DATASET_CODE = "DATASET_CODE"
    DATASET_COUNT = "DATASET_COUNT"
    DOWNLOADS = "DOWNLOADS"
    PREMIUM = "PREMIUM"
    IMAGE_URL = "IMAGE_URL"
    LAST_REFRESH_TIME = "LAST_REFRESH_TIME"
    START_DATE = "START_DATE"
    END_DATE = "END_DATE"
    DATASET_TYPE = "DATASET_TYPE"
    FREQUENCY = "FREQUENCY"
    DATABASE_ID = "DATABASE_ID"
    DATASET_ID = "DATASET_ID"
    COLUMN_NAMES = "COLUMN_NAMES"
    FAVOURITE = "FAVOURITE"
    URL_NAME = "URL_NAME"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def of(cls, name: str) -> "QuandlField":
        """Resolve a raw provider column name. Raises UnknownFieldError."""
        return FIELD_VOCABULARY.resolve(name)


_ALIASES = {
    "name": QuandlField.NAME,
    "description": QuandlField.DESCRIPTION,
    "databasecode": QuandlField.DATABASE_CODE,
    "database_code": QuandlField.DATABASE_CODE,
    "datasetcode": QuandlField.DATASET_CODE,
    "dataset_code": QuandlField.DATASET_CODE,
    "datasetcount": QuandlField.DATASET_COUNT,
    "datasets_count": QuandlField.DATASET_COUNT,
    "downloads": QuandlField.DOWNLOADS,
    "premium": QuandlField.PREMIUM,
    "imageurl": QuandlField.IMAGE_URL,
    "image": QuandlField.IMAGE_URL,
    "favorite": QuandlField.FAVOURITE,
    "url_name": QuandlField.URL_NAME,
}


class FieldVocabulary:
    """Read-only, case-insensitive map of raw column name -> QuandlField."""

    def __init__(self, aliases: Mapping[str, QuandlField]) -> None:
        self._aliases = MappingProxyType(
            {name.lower(): field for name, field in aliases.items()}
        )

    def resolve(self, raw_name: str) -> QuandlField:
        field = self._aliases.get(str(raw_name).lower())
        if field is None:
            raise UnknownFieldError(str(raw_name))
        return field

    def aliases(self) -> Mapping[str, QuandlField]:
        return self._aliases

    def __contains__(self, raw_name: object) -> bool:
        return str(raw_name).lower() in self._aliases


FIELD_VOCABULARY = FieldVocabulary(_ALIASES)
