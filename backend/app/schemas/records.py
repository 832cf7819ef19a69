from typing import Any

from pydantic import BaseModel, Field


class Record(BaseModel):
    """One Airtable record as returned by the list-records endpoint."""

    id: str
    fields: dict[str, Any] = Field(default_factory=dict)
    created_time: str | None = Field(default=None, alias="createdTime")

    model_config = {"populate_by_name": True}


class RecordList(BaseModel):
    records: list[Record] = Field(default_factory=list)
    offset: str | None = None


class ProxyQuery(BaseModel):
    """Body accepted by the proxy endpoint. tableName is checked by the route."""

    table_name: str | None = Field(default=None, alias="tableName")
    filter_formula: str | None = Field(default=None, alias="filterFormula")

    model_config = {"populate_by_name": True}
