# Quandl source plugin: options, field vocabulary, metadata, source

from quandl_app.ingestion.quandl.exceptions import (
    QuandlException,
    QuandlOptionsError,
    UnknownFieldError,
)
from quandl_app.ingestion.quandl.fields import FIELD_VOCABULARY, FieldVocabulary, QuandlField
from quandl_app.ingestion.quandl.metadata import QuandlDatasetInfo
from quandl_app.ingestion.quandl.options import (
    DataOptions,
    DatabasesOptions,
    DatasetsOptions,
    MetaDataOptions,
    Operation,
    QuandlOptions,
    build_options,
)
from quandl_app.ingestion.quandl.source import QuandlSource

__all__ = [
    "DataOptions",
    "DatabasesOptions",
    "DatasetsOptions",
    "FIELD_VOCABULARY",
    "FieldVocabulary",
    "MetaDataOptions",
    "Operation",
    "QuandlDatasetInfo",
    "QuandlException",
    "QuandlField",
    "QuandlOptions",
    "QuandlOptionsError",
    "QuandlSource",
    "UnknownFieldError",
    "build_options",
]
