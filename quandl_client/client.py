from datetime import date
from typing import Any

import pandas as pd
import requests

from quandl_app.ingestion.core.registry import SourceRegistry, registry as default_registry
from quandl_app.ingestion.quandl import Operation, QuandlSource, build_options


class QuandlClient:
    """High level API to load Quandl data and metadata as DataFrames.

    The client registers a QuandlSource on construction and reads every
    request through the registry, so any other registered source keeps working.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        registry: SourceRegistry | None = None,
        session: requests.Session | None = None,
    ):
        self.registry = registry if registry is not None else default_registry
        self.registry.register(
            QuandlSource(api_key=api_key, base_url=base_url, session=session)
        )

    def get_database_listing(
        self,
        max_pages: int | None = None,
        page_size: int | None = None,
    ) -> pd.DataFrame:
        """Every database on Quandl, indexed by database id."""
        options = build_options(
            Operation.DATABASES, max_pages=max_pages, page_size=page_size
        )
        return self.registry.read(options)

    def get_dataset_listing(self, database: str) -> pd.DataFrame:
        """Every dataset code in ``database`` (e.g. "WIKI"), indexed by code."""
        options = build_options(Operation.DATASETS, database_code=database)
        return self.registry.read(options)

    def get_metadata(self, database: str, dataset: str) -> pd.DataFrame:
        """One-row metadata frame for ``database``/``dataset`` (e.g. "WIKI"/"AAPL")."""
        options = build_options(
            Operation.META_DATA, database_code=database, dataset_code=dataset
        )
        return self.registry.read(options)

    def get_daily_data(
        self,
        database: str,
        dataset: str,
        start_date: date | str,
        end_date: date | str,
        **options: Any,
    ) -> pd.DataFrame:
        """Time series for ``database``/``dataset``, indexed by date.

        Extra keyword options: limit, rows, column_index, ascending, api_key.
        """
        request = build_options(
            Operation.DATA,
            database_code=database,
            dataset_code=dataset,
            start_date=start_date,
            end_date=end_date,
            **options,
        )
        return self.registry.read(request)
