"""CSV import Pydantic v2 response schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RowError(BaseModel):
    """A validation failure for one CSV data row (row numbers count the header as row 1)."""

    row: int = Field(ge=2, description="1-based line number in the uploaded file")
    message: str


class ImportResult(BaseModel):
    """Outcome of one import call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    total_rows: int = Field(ge=0, description="Data rows scanned (header and blank lines excluded)")
    valid_rows: int = Field(ge=0, description="Rows that passed validation")
    errors: list[RowError] = Field(default_factory=list)
    inserted_count: int = Field(ge=0, description="Buyers persisted by this call")
