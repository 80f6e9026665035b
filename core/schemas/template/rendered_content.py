"""Rendered title and body."""

from pydantic import ConfigDict

from core.schemas.base_schema_model import BaseSchemaModel


class RenderedContent(BaseSchemaModel):
    """Concrete text produced from a template and a placeholder map.

    Whitespace is kept exactly as rendered.
    """

    model_config = ConfigDict(str_strip_whitespace=False)

    title: str
    body: str
