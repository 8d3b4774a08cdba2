"""Document models for the front-matter contract and the parse pipeline"""

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, TypeAdapter, field_validator


# Keys owned by the loader rather than the front-matter block
LOADER_FIELDS = {"body", "path", "content_hash"}


class Document(BaseModel):
    """Fields shared by every content document.

    Front-matter keys are matched case-sensitively; unknown keys are dropped.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    title:        str
    template:     str
    slug:         str = Field(..., min_length=1)
    draft:        StrictBool = False
    date:         Optional[datetime] = None
    description:  Optional[str] = None
    body:         str = ""              # markdown after the front-matter, untouched
    path:         str = ""              # source path relative to the content root
    content_hash: str = ""              # sha256 of the raw file

    @field_validator("date", mode="before")
    @classmethod
    def _date_to_datetime(cls, value: Any) -> Any:
        """YAML yields bare dates for 'date: 2021-03-01'; promote them to midnight."""
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time())
        return value

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        if not value.strip("/"):
            raise ValueError("slug must name a path")
        if any(ch.isspace() for ch in value):
            raise ValueError("slug must not contain whitespace")
        if ".." in value.split("/"):
            raise ValueError("slug must not contain '..' segments")
        return value

    def metadata(self) -> dict[str, Any]:
        """JSON-safe front-matter view using the on-disk key names."""
        return self.model_dump(mode="json", by_alias=True, exclude=LOADER_FIELDS, exclude_none=True)


class Post(Document):
    """A dated tutorial article."""
    template: Literal["post"]
    date:     datetime
    category: Optional[str] = None
    tags:     list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @property
    def tag_set(self) -> frozenset[str]:
        return frozenset(self.tags)


class Page(Document):
    """A standalone page such as 'about'."""
    template:     Literal["page"]
    social_image: Optional[str] = Field(default=None, alias="socialImage")


AnyDocument = Annotated[Union[Post, Page], Field(discriminator="template")]
_document_adapter = TypeAdapter(AnyDocument)


def document_from_frontmatter(
    frontmatter: dict[str, Any],
    body: str,
    path: str = "",
    content_hash: str = "",
    ) -> Post | Page:
    """Validate a front-matter mapping into a Post or Page, selected by its template.

    Raises pydantic.ValidationError on any contract violation.
    """
    data = {k: v for k, v in frontmatter.items() if k not in LOADER_FIELDS}
    data.update(body=body, path=path, content_hash=content_hash)
    return _document_adapter.validate_python(data)


@dataclass
class ParsedDoc:
    """Internal parse result before validation; not persisted."""
    path:         Path
    rel_path:     str           # posix path relative to the content root
    raw_markdown: str           # full file content (includes front-matter)
    markdown:     str           # body only (front-matter stripped)
    frontmatter:  dict[str, Any]
    hash:         str
