import io
from datetime import date
from functools import lru_cache

import pandas as pd
from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from quandl_client.client import QuandlClient

router = APIRouter(prefix="/v1", tags=["Quandl"])


@lru_cache(maxsize=1)
def get_client() -> QuandlClient:
    return QuandlClient()


def frame_to_records(frame: pd.DataFrame, index_name: str) -> list[dict]:
    """DataFrame -> JSON-safe list of row dicts, index included as ``index_name``."""
    out = frame.rename(columns=str).rename_axis(index_name).reset_index()
    out = out.astype(object).where(out.notna(), None)
    return out.to_dict(orient="records")


@router.get("/databases")
def get_databases(
    max_pages: int | None = Query(None, ge=1),
    page_size: int | None = Query(None, ge=1),
    client: QuandlClient = Depends(get_client),
):
    frame = client.get_database_listing(max_pages=max_pages, page_size=page_size)
    return frame_to_records(frame, "id")


@router.get("/databases/{database}/datasets")
def get_datasets(database: str, client: QuandlClient = Depends(get_client)):
    frame = client.get_dataset_listing(database)
    return frame_to_records(frame, "code")


@router.get("/datasets/{database}/{dataset}/metadata")
def get_metadata(
    database: str,
    dataset: str,
    client: QuandlClient = Depends(get_client),
):
    frame = client.get_metadata(database, dataset)
    return frame_to_records(frame, "id")


def _daily_data(
    client: QuandlClient,
    database: str,
    dataset: str,
    start_date: date,
    end_date: date,
    limit: int | None,
    rows: int | None,
    column_index: int | None,
    order: str,
) -> pd.DataFrame:
    return client.get_daily_data(
        database,
        dataset,
        start_date,
        end_date,
        limit=limit,
        rows=rows,
        column_index=column_index,
        ascending=order == "asc",
    )


@router.get("/datasets/{database}/{dataset}/data")
def get_data(
    database: str,
    dataset: str,
    start_date: date,
    end_date: date,
    limit: int | None = Query(None, ge=1),
    rows: int | None = Query(None, ge=1),
    column_index: int | None = Query(None, ge=0),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    client: QuandlClient = Depends(get_client),
):
    frame = _daily_data(
        client, database, dataset, start_date, end_date,
        limit, rows, column_index, order,
    )
    return frame_to_records(frame, "Date")


@router.get("/datasets/{database}/{dataset}/data.csv")
def export_data_csv(
    database: str,
    dataset: str,
    start_date: date,
    end_date: date,
    limit: int | None = Query(None, ge=1),
    rows: int | None = Query(None, ge=1),
    column_index: int | None = Query(None, ge=0),
    order: str = Query("asc", pattern="^(asc|desc)$"),
    client: QuandlClient = Depends(get_client),
):
    frame = _daily_data(
        client, database, dataset, start_date, end_date,
        limit, rows, column_index, order,
    )

    buffer = io.StringIO()
    frame.to_csv(buffer, date_format="%Y-%m-%d")
    buffer.seek(0)

    return StreamingResponse(
        buffer,
        media_type="text/csv",
        headers={
            "Content-Disposition": f"attachment; filename={database}_{dataset}.csv"
        },
    )
