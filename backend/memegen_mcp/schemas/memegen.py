"""
Memegen schemas.

This module contains the Pydantic models for the upstream memegen.link
template documents and the typed argument contract of every tool.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImageExtension(str, Enum):
    """Image formats the memegen.link image endpoint can render."""
    PNG = "png"
    JPG = "jpg"
    GIF = "gif"
    WEBP = "webp"


# =============================================================================
# UPSTREAM TEMPLATE SCHEMAS
# =============================================================================

class TemplateExample(BaseModel):
    """Example rendering attached to a template."""

    model_config = ConfigDict(extra="allow")

    text: list[str] = Field(default_factory=list)
    url: str = ""


class Template(BaseModel):
    """
    A meme template as returned by memegen.link.

    Fields the API adds beyond the documented ones are tolerated; the
    listing tools only read the documented ones.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    lines: Optional[int] = None
    overlays: Optional[int] = None
    styles: Optional[list[str]] = None
    blank: str = ""
    example: Optional[TemplateExample] = None
    source: Optional[str] = None
    keywords: Optional[list[str]] = None

    @property
    def search_text(self) -> str:
        """Lowercased id, name and keywords joined for substring search."""
        return f"{self.id} {self.name} {' '.join(self.keywords or [])}".lower()


class TemplateSummary(BaseModel):
    """
    Simplified template projection returned by the listing tools.

    Always build it through from_template so missing upstream fields get
    their defaults in one place.
    """

    id: str
    name: str
    lines: int
    example: str
    keywords: list[str]

    @classmethod
    def from_template(cls, template: Template) -> "TemplateSummary":
        """Project a Template, filling defaults for absent fields."""
        example_url = template.example.url if template.example else ""
        return cls(
            id=template.id,
            name=template.name,
            lines=template.lines or 2,
            example=example_url or template.blank,
            keywords=list(template.keywords or []),
        )


# =============================================================================
# TOOL ARGUMENT SCHEMAS
# =============================================================================

class ToolArguments(BaseModel):
    """Base for tool arguments: strict types, unknown keys dropped."""

    model_config = ConfigDict(strict=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, v):
        """Optional arguments may be omitted, but not sent as null."""
        if v is None:
            raise ValueError("must not be null")
        return v


class ListTemplatesArgs(ToolArguments):
    filter: Optional[str] = Field(
        None,
        description="Optional search filter for template names",
    )
    animated: Optional[bool] = Field(
        None,
        description="Filter for animated templates only",
    )


class SearchTemplatesArgs(ToolArguments):
    query: str = Field(
        ...,
        description="Search query for finding templates",
    )


class GetTemplateInfoArgs(ToolArguments):
    template_id: str = Field(
        ...,
        description="The ID of the template to get information about",
    )


class CreateMemeArgs(ToolArguments):
    """Arguments for building a meme image URL."""

    template_id: str = Field(
        ...,
        description="The ID of the meme template to use",
    )
    top_text: Optional[str] = Field(
        None,
        description="Text for the top of the meme",
    )
    bottom_text: Optional[str] = Field(
        None,
        description="Text for the bottom of the meme",
    )
    text_lines: Optional[list[str]] = Field(
        None,
        description="Array of text lines for multi-line memes (use this OR top_text/bottom_text)",
    )
    style: Optional[str] = Field(
        None,
        description="Style variant to use",
    )
    font: Optional[str] = Field(
        None,
        description="Font to use for the text",
    )
    # Enum values arrive as plain strings from JSON callers.
    extension: ImageExtension = Field(
        ImageExtension.PNG,
        strict=False,
        description="Image format (default: png)",
    )

    def resolve_text_lines(self) -> list[str]:
        """
        Ordered caption lines for the image URL.

        text_lines wins when non-empty; otherwise top_text then bottom_text,
        skipping empty ones. An empty result becomes a blank top/bottom pair.
        """
        if self.text_lines:
            return list(self.text_lines)

        texts = [text for text in (self.top_text, self.bottom_text) if text]
        return texts or ["", ""]


# =============================================================================
# TOOL RESULT SCHEMAS
# =============================================================================

class MemeUrlResponse(BaseModel):
    """Result of create_meme."""

    url: str
    template_id: str


class TemplateNotFound(BaseModel):
    """Structured not-found result of get_template_info."""

    error: str

    @classmethod
    def for_id(cls, template_id: str) -> "TemplateNotFound":
        return cls(error=f"Template '{template_id}' not found")
