"""
Quandl source: loads data and catalog metadata from the Quandl v3 REST API.

One call to read() performs one CSV/JSON fetch, one bounded pagination loop or
one ZIP download. No retries, no caching; errors surface as QuandlException.
"""

import atexit
import tempfile
import uuid
import zipfile
from io import StringIO
from pathlib import Path
from typing import Iterator, List, Optional

import pandas as pd
import requests

from quandl_app.config.settings import settings
from quandl_app.ingestion.core.base_source import BaseSource
from quandl_app.ingestion.quandl.exceptions import QuandlException
from quandl_app.ingestion.quandl.fields import (
    FIELD_VOCABULARY,
    FieldVocabulary,
    QuandlField,
)
from quandl_app.ingestion.quandl.metadata import QuandlDatasetInfo
from quandl_app.ingestion.quandl.options import (
    DataOptions,
    DatabasesOptions,
    DatasetsOptions,
    MetaDataOptions,
    Operation,
    QuandlOptions,
)
from quandl_app.utils.logger import logger


DEFAULT_MAX_PAGES = 100
DEFAULT_PAGE_SIZE = 100
DOWNLOAD_CHUNK_SIZE = 1024 * 100

# Header of /databases.csv, minus the "id" row key.
DATABASE_COLUMNS = [
    "name",
    "database_code",
    "description",
    "datasets_count",
    "downloads",
    "premium",
    "image",
    "favorite",
    "url_name",
]

# Transport and parse failures; pandas and pydantic errors are ValueErrors.
_WRAPPED_ERRORS = (requests.RequestException, OSError, ValueError, zipfile.BadZipFile)


def _delete_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.debug("Could not delete temp file {}: {}", path, e)


class QuandlSource(BaseSource):
    """Source for Quandl options (DataOptions, DatabasesOptions, DatasetsOptions, MetaDataOptions)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        vocabulary: FieldVocabulary = FIELD_VOCABULARY,
    ) -> None:
        self.api_key = api_key or settings.QUANDL_API_KEY
        self.base_url = (base_url or settings.QUANDL_BASE_URL).rstrip("/")
        if not self.api_key:
            raise QuandlException("The Quandl apiKey cannot be empty")
        self.timeout = timeout if timeout is not None else settings.QUANDL_TIMEOUT
        self.vocabulary = vocabulary
        self._session = session

    def is_supported(self, options: object) -> bool:
        return isinstance(options, QuandlOptions)

    def read(self, options: QuandlOptions) -> pd.DataFrame:
        options.validate()
        operation = options.operation
        if operation is Operation.DATA:
            return self.get_data(options)
        if operation is Operation.DATASETS:
            return self.get_datasets(options)
        if operation is Operation.DATABASES:
            return self.get_databases(options)
        if operation is Operation.META_DATA:
            return self.get_metadata(options)
        raise QuandlException(f"Unsupported request: {options}", options)

    # --- strategies ---

    def get_data(self, options: DataOptions) -> pd.DataFrame:
        """Time series frame indexed by date, one column per provider column."""
        path = f"/api/v3/datasets/{options.database_code}/{options.dataset_code}.csv"
        url = self._url(options, path, options.to_query_string())
        try:
            text = self._get(url, path).text
            frame = pd.read_csv(StringIO(text), index_col=0)
            frame.index = pd.to_datetime(frame.index, format="%Y-%m-%d")
            frame.index.name = "Date"
            return frame
        except _WRAPPED_ERRORS as e:
            raise QuandlException(
                f"Failed to load data from Quandl for {options}", options
            ) from e

    def get_metadata(self, options: MetaDataOptions) -> pd.DataFrame:
        """Single-row frame of dataset metadata keyed by dataset id."""
        path = (
            f"/api/v3/datasets/{options.database_code}/"
            f"{options.dataset_code}/metadata.json"
        )
        url = self._url(options, path)
        try:
            info = QuandlDatasetInfo.model_validate_json(self._get(url, path).text)
            return info.to_frame()
        except _WRAPPED_ERRORS as e:
            raise QuandlException(
                f"Failed to load dataset metadata from Quandl for {options}", options
            ) from e

    def get_datasets(self, options: DatasetsOptions) -> pd.DataFrame:
        """Listing of dataset codes in a database, indexed by code."""
        database = options.database_code
        path = f"/api/v3/databases/{database}/codes.csv"
        url = self._url(options, path)
        try:
            local_file = self._download_zip(url, path)
            with zipfile.ZipFile(local_file) as archive:
                frames = list(self._iter_code_frames(archive, database))
            if frames:
                union = pd.concat(frames)
            else:
                union = pd.DataFrame(
                    columns=[QuandlField.DESCRIPTION, QuandlField.DATABASE_CODE]
                )
        except _WRAPPED_ERRORS as e:
            raise QuandlException(
                f"Failed to load dataset listing from Quandl for {options}", options
            ) from e
        logger.info("Loaded {} dataset codes for {}", len(union), database)
        return self._map_columns(union)

    def get_databases(self, options: DatabasesOptions) -> pd.DataFrame:
        """Full database catalog, indexed by database id."""
        max_pages = options.max_pages if options.max_pages is not None else DEFAULT_MAX_PAGES
        page_size = options.page_size if options.page_size is not None else DEFAULT_PAGE_SIZE
        path = "/api/v3/databases.csv"
        frames: List[pd.DataFrame] = []
        try:
            for page in range(max_pages):
                url = self._url(options, path, f"page={page}&per_page={page_size}")
                frame = self._read_database_page(self._get(url, path).text)
                if frame.empty:
                    break
                frames.append(frame)
            else:
                logger.warning(
                    "Database listing stopped at max_pages={} before an empty page; "
                    "the catalog may be truncated",
                    max_pages,
                )
            union = pd.concat(frames) if frames else pd.DataFrame(columns=DATABASE_COLUMNS)
        except _WRAPPED_ERRORS as e:
            raise QuandlException(
                f"Failed to load database list from Quandl: {e}", options
            ) from e
        logger.info("Loaded {} databases from {} page(s)", len(union), len(frames))
        return self._map_columns(union)

    # --- helpers ---

    def _url(self, options: QuandlOptions, path: str, query: Optional[str] = None) -> str:
        api_key = options.api_key or self.api_key
        url = f"{self.base_url}{path}?api_key={api_key}"
        return f"{url}&{query}" if query else url

    def _get(self, url: str, path: str, stream: bool = False) -> requests.Response:
        logger.info("Fetching Quandl {}", path)
        if self._session is not None:
            response = self._session.get(url, timeout=self.timeout, stream=stream)
        else:
            with requests.Session() as session:
                response = session.get(url, timeout=self.timeout, stream=stream)
                if stream:
                    # Body must be read before the session closes.
                    _ = response.content
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            raise
        return response

    def _download_zip(self, url: str, path: str) -> Path:
        local_file = Path(tempfile.gettempdir()) / f"{uuid.uuid4()}.zip"
        atexit.register(_delete_quietly, local_file)
        response = self._get(url, path, stream=True)
        with open(local_file, "wb") as out:
            for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                if chunk:
                    out.write(chunk)
        logger.debug("Downloaded {} to {}", path, local_file)
        return local_file

    def _iter_code_frames(
        self, archive: zipfile.ZipFile, database: str
    ) -> Iterator[pd.DataFrame]:
        for entry in archive.infolist():
            if entry.is_dir():
                continue
            with archive.open(entry) as handle:
                frame = pd.read_csv(
                    handle,
                    header=None,
                    index_col=0,
                    dtype=str,
                    keep_default_na=False,
                )
            frame.index.name = None
            frame.columns = [QuandlField.DESCRIPTION]
            frame[QuandlField.DATABASE_CODE] = database
            yield frame

    def _read_database_page(self, text: str) -> pd.DataFrame:
        if not text.strip():
            return pd.DataFrame(columns=DATABASE_COLUMNS)
        frame = pd.read_csv(
            StringIO(text),
            index_col="id",
            dtype={"datasets_count": "int64", "downloads": "int64"},
        )
        frame.index.name = None
        return frame

    def _map_columns(self, frame: pd.DataFrame) -> pd.DataFrame:
        return frame.rename(columns=self.vocabulary.resolve)
