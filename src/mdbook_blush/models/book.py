"""Data models for the book structure mdBook hands to preprocessors."""

from collections.abc import Iterator
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


class Separator(BaseModel):
    """Spacer between chapters in the summary."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["separator"] = "separator"


class PartTitle(BaseModel):
    """Title that groups the chapters following it."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["part_title"] = "part_title"
    title: str


class Chapter(BaseModel):
    """Chapter content and metadata."""

    model_config = ConfigDict(extra="allow")

    kind: Literal["chapter"] = "chapter"
    name: str
    content: str = ""
    number: list[int] | None = None
    sub_items: list["BookItem"] = Field(default_factory=list)
    path: str | None = None
    source_path: str | None = None
    parent_names: list[str] = Field(default_factory=list)


def _untag(value: Any) -> Any:
    """Convert serde's externally tagged enum form into a tagged dict.

    mdBook writes ``{"Chapter": {...}}``, ``"Separator"`` and
    ``{"PartTitle": "..."}``. Anything else is handed to pydantic as is.
    """
    if value == "Separator":
        return {"kind": "separator"}
    if isinstance(value, dict) and len(value) == 1:
        ((tag, payload),) = value.items()
        if tag == "Chapter" and isinstance(payload, dict):
            return {**payload, "kind": "chapter"}
        if tag == "PartTitle":
            return {"kind": "part_title", "title": payload}
    return value


BookItem = Annotated[
    Union[Chapter, Separator, PartTitle],
    Field(discriminator="kind"),
    BeforeValidator(_untag),
]

Chapter.model_rebuild()


def item_to_wire(item: BookItem) -> Any:
    """Serialize a book item back into mdBook's externally tagged form."""
    if isinstance(item, Chapter):
        data = item.model_dump(mode="json", exclude={"kind", "sub_items"})
        data["sub_items"] = [item_to_wire(sub_item) for sub_item in item.sub_items]
        return {"Chapter": data}
    if isinstance(item, Separator):
        return "Separator"
    if isinstance(item, PartTitle):
        return {"PartTitle": item.title}
    raise TypeError(f"Unknown book item: {type(item).__name__}")


class Book(BaseModel):
    """Complete book structure (the second element of mdBook's input)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    sections: list[BookItem] = Field(default_factory=list)
    non_exhaustive: None = Field(default=None, alias="__non_exhaustive")

    def iter_chapters(self) -> Iterator[Chapter]:
        """Yield every chapter depth first, in document order."""
        stack = list(reversed(self.sections))
        while stack:
            item = stack.pop()
            if isinstance(item, Chapter):
                yield item
                stack.extend(reversed(item.sub_items))

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict mdBook expects on stdout."""
        data = self.model_dump(mode="json", by_alias=True, exclude={"sections"})
        data["sections"] = [item_to_wire(item) for item in self.sections]
        return data
