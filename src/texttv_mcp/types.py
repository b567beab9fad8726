"""Data model for Text TV pages and the page cache."""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

MIN_PAGE_NUMBER = 100
MAX_PAGE_NUMBER = 999

# Upstream fields may be a single string or a list of lines
ContentField = Optional[Union[str, List[str]]]


class PageContent(BaseModel):
    """Normalized content of a single Text TV page."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Page text, multiple lines")
    date_updated_unix: int = Field(
        default=0, ge=0, description="Unix timestamp (seconds) of last update"
    )


class PageResponse(BaseModel):
    """A page object as returned by the texttv.nu API."""

    model_config = ConfigDict(extra="ignore")

    num: Optional[Union[str, int]] = None
    title: Optional[str] = None
    content: ContentField = None
    content_plain: ContentField = None
    next_page: Optional[Union[str, int]] = None
    prev_page: Optional[Union[str, int]] = None
    date_updated_unix: Optional[int] = None


class CacheEntry(BaseModel):
    """A cached page together with its capture time in milliseconds."""

    content: PageContent
    timestamp_ms: float


class CacheEntryStats(BaseModel):
    page_number: int
    age_seconds: int


class CacheStats(BaseModel):
    """Point-in-time snapshot of the page cache."""

    size: int
    entries: List[CacheEntryStats] = Field(default_factory=list)
