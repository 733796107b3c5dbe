# Schemas package - Pydantic models for upstream documents and tool arguments
from memegen_mcp.schemas.memegen import (
    CreateMemeArgs,
    GetTemplateInfoArgs,
    ImageExtension,
    ListTemplatesArgs,
    MemeUrlResponse,
    SearchTemplatesArgs,
    Template,
    TemplateExample,
    TemplateNotFound,
    TemplateSummary,
)

__all__ = [
    "CreateMemeArgs",
    "GetTemplateInfoArgs",
    "ImageExtension",
    "ListTemplatesArgs",
    "MemeUrlResponse",
    "SearchTemplatesArgs",
    "Template",
    "TemplateExample",
    "TemplateNotFound",
    "TemplateSummary",
]
