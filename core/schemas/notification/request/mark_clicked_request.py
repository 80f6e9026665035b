"""Request schema for recording a click."""

from pydantic import Field

from core.schemas.base_schema_model import BaseSchemaModel


class MarkClickedRequest(BaseSchemaModel):
    """Optional free-text action the recipient took."""

    action_taken: str | None = Field(None, max_length=255)
