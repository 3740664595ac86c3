from datetime import date, datetime, timezone
from typing import List, Optional

import pandas as pd
from pydantic import BaseModel, Field

from quandl_app.ingestion.quandl.fields import QuandlField


def _utc_timestamp(value: Optional[datetime]) -> pd.Timestamp:
    if value is None:
        return pd.NaT
    if value.tzinfo is None:
        return pd.Timestamp(value, tz="UTC")
    return pd.Timestamp(value.astimezone(timezone.utc))


class DatasetDetails(BaseModel):
    id: int
    dataset_code: Optional[str] = None
    database_code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    refreshed_at: Optional[datetime] = None
    newest_available_date: Optional[date] = None
    oldest_available_date: Optional[date] = None
    column_names: List[str] = Field(default_factory=list)
    frequency: Optional[str] = None
    type: Optional[str] = None
    premium: bool = False
    database_id: Optional[int] = None


class QuandlDatasetInfo(BaseModel):
    """Metadata document returned by /datasets/{db}/{ds}/metadata.json."""

    dataset: DatasetDetails

    @property
    def id(self) -> int:
        return self.dataset.id

    @property
    def dataset_code(self) -> Optional[str]:
        return self.dataset.dataset_code

    @property
    def database_code(self) -> Optional[str]:
        return self.dataset.database_code

    @property
    def name(self) -> Optional[str]:
        return self.dataset.name

    @property
    def description(self) -> Optional[str]:
        return self.dataset.description

    @property
    def refreshed_at(self) -> Optional[datetime]:
        return self.dataset.refreshed_at

    @property
    def oldest_available_date(self) -> Optional[date]:
        return self.dataset.oldest_available_date

    @property
    def newest_available_date(self) -> Optional[date]:
        return self.dataset.newest_available_date

    @property
    def column_names(self) -> List[str]:
        return self.dataset.column_names

    @property
    def frequency(self) -> Optional[str]:
        return self.dataset.frequency

    @property
    def type(self) -> Optional[str]:
        return self.dataset.type

    @property
    def premium(self) -> bool:
        return self.dataset.premium

    @property
    def database_id(self) -> Optional[int]:
        return self.dataset.database_id

    def to_frame(self) -> pd.DataFrame:
        """Single-row frame keyed by dataset id; COLUMN_NAMES holds the whole list in one cell."""
        row = {
            QuandlField.NAME: self.name,
            QuandlField.DESCRIPTION: self.description,
            QuandlField.DATASET_CODE: self.dataset_code,
            QuandlField.DATABASE_CODE: self.database_code,
            QuandlField.LAST_REFRESH_TIME: _utc_timestamp(self.refreshed_at),
            QuandlField.START_DATE: self.oldest_available_date,
            QuandlField.END_DATE: self.newest_available_date,
            QuandlField.DATASET_TYPE: self.type,
            QuandlField.FREQUENCY: self.frequency,
            QuandlField.DATABASE_ID: self.database_id,
            QuandlField.DATASET_ID: self.id,
            QuandlField.PREMIUM: self.premium,
            QuandlField.COLUMN_NAMES: list(self.column_names),
        }
        return pd.DataFrame([row], index=pd.Index([self.id]))
