"""Template schemas."""

from core.schemas.template.rendered_content import RenderedContent
from core.schemas.template.template_create import TemplateCreate
from core.schemas.template.template_detail import TemplateDetail

__all__ = ["RenderedContent", "TemplateCreate", "TemplateDetail"]
