"""Data model for the context mdBook sends alongside the book."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PreprocessorContext(BaseModel):
    """Build context: book root, parsed book.toml, target renderer."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    root: str
    config: dict[str, Any] = Field(default_factory=dict)
    renderer: str
    mdbook_version: str
    non_exhaustive: None = Field(default=None, alias="__non_exhaustive")
