"""
Request options for the Quandl source.

Each operation has its own frozen model carrying exactly the fields it needs,
so a well-typed caller cannot build an incomplete request. ``build_options``
is the untyped entry point (operation name + keyword fields) and reports every
construction problem as a QuandlOptionsError, before any network access.
"""

from datetime import date
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from quandl_app.ingestion.quandl.exceptions import QuandlOptionsError


class Operation(str, Enum):
    DATA = "DATA"
    DATABASES = "DATABASES"
    DATASETS = "DATASETS"
    META_DATA = "META_DATA"


class QuandlOptions(BaseModel):
    """Base request descriptor. Use one of the operation-specific subclasses."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    operation: ClassVar[Optional[Operation]] = None
    required: ClassVar[Tuple[str, ...]] = ()

    api_key: Optional[str] = None

    @model_validator(mode="after")
    def check_required(self) -> "QuandlOptions":
        self.validate()
        return self

    def validate(self) -> None:
        """Raise QuandlOptionsError if the operation or a required field is missing."""
        if self.operation is None:
            raise QuandlOptionsError("The operation code must be specified", self)
        for name in self.required:
            if getattr(self, name) in (None, ""):
                label = name.replace("_", " ")
                raise QuandlOptionsError(f"The {label} must be specified", self)

    def __str__(self) -> str:
        fields = ", ".join(
            f"{k}={v}" for k, v in self.model_dump(exclude={"api_key"}).items()
            if v is not None
        )
        return f"{type(self).__name__}({fields})"


class DataOptions(QuandlOptions):
    """Time series rows for one dataset between two dates."""

    operation: ClassVar[Optional[Operation]] = Operation.DATA
    required: ClassVar[Tuple[str, ...]] = (
        "start_date", "end_date", "database_code", "dataset_code",
    )

    database_code: Optional[str] = None
    dataset_code: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = None
    rows: Optional[int] = None
    column_index: Optional[int] = None
    ascending: bool = True

    def to_query_string(self) -> str:
        """Optional query parameters in wire order; absent options are omitted."""
        params: List[Tuple[str, Any]] = []
        if self.start_date is not None:
            params.append(("start_date", self.start_date.isoformat()))
        if self.end_date is not None:
            params.append(("end_date", self.end_date.isoformat()))
        if self.column_index is not None:
            params.append(("column_index", self.column_index))
        if self.rows is not None:
            params.append(("rows", self.rows))
        if self.limit is not None:
            params.append(("limit", self.limit))
        params.append(("order", "asc" if self.ascending else "desc"))
        return urlencode(params)


class DatabasesOptions(QuandlOptions):
    """Paged listing of every database in the Quandl catalog."""

    operation: ClassVar[Optional[Operation]] = Operation.DATABASES

    max_pages: Optional[int] = Field(None, ge=1)
    page_size: Optional[int] = Field(None, ge=1)


class DatasetsOptions(QuandlOptions):
    """Listing of every dataset code in one database."""

    operation: ClassVar[Optional[Operation]] = Operation.DATASETS
    required: ClassVar[Tuple[str, ...]] = ("database_code",)

    database_code: Optional[str] = None


class MetaDataOptions(QuandlOptions):
    """Metadata for a single dataset."""

    operation: ClassVar[Optional[Operation]] = Operation.META_DATA
    required: ClassVar[Tuple[str, ...]] = ("database_code", "dataset_code")

    database_code: Optional[str] = None
    dataset_code: Optional[str] = None


OPTIONS_BY_OPERATION: Dict[Operation, Type[QuandlOptions]] = {
    Operation.DATA: DataOptions,
    Operation.DATABASES: DatabasesOptions,
    Operation.DATASETS: DatasetsOptions,
    Operation.META_DATA: MetaDataOptions,
}


def build_options(
    operation: Union[Operation, str, None], **fields: Any
) -> QuandlOptions:
    """Build the options variant for ``operation``. Raises QuandlOptionsError."""
    if operation is None:
        raise QuandlOptionsError("The operation code must be specified")
    try:
        op = Operation(operation.upper() if isinstance(operation, str) else operation)
    except ValueError as e:
        raise QuandlOptionsError(f"Unsupported operation: {operation!r}") from e

    options_cls = OPTIONS_BY_OPERATION[op]
    try:
        return options_cls(**fields)
    except ValidationError as e:
        raise QuandlOptionsError(
            f"Invalid options for {op.value}: {e.errors(include_url=False)}"
        ) from e
