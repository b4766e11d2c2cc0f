# schemas.py
"""
Pydantic models for bit.ly v2 responses.

The clients return plain decoded mappings. These models are typed views
callers can validate those mappings into. Every field is optional and
unknown fields are kept, since bit.ly omits whatever it has no data for.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from bitly import is_success


class BitlyModel(BaseModel):
    """Base for response views: tolerant of extra and missing fields."""

    model_config = ConfigDict(extra="allow")


class Envelope(BitlyModel):
    """Decoded JSON root of every bit.ly response."""

    errorCode: Optional[Any] = Field(default=None, description="0 on success")
    errorMessage: Optional[str] = Field(default=None, description="Error text")
    statusCode: Optional[str] = Field(default=None, description="OK or ERROR")
    results: Any = Field(default=None, description="Method-specific payload")

    @property
    def succeeded(self) -> bool:
        """
        Whether the call succeeded.

        Returns:
            True only if errorCode is present and 0 (or "0").
        """
        return is_success({"errorCode": self.errorCode})


class LinkInfo(BitlyModel):
    """Metadata for one hash, as returned by the info method."""

    calais: Optional[Any] = None
    contentLength: Optional[int] = None
    contentType: Optional[str] = None
    exif: Optional[Any] = None
    globalHash: Optional[str] = None
    hash: Optional[str] = None
    htmlMetaDescription: Optional[str] = None
    htmlMetaKeywords: Optional[list[str]] = None
    htmlTitle: Optional[str] = None
    id3: Optional[Any] = None
    keywords: Optional[list[str]] = None
    longUrl: Optional[str] = None
    metacarta: Optional[Any] = None
    mirrorUrl: Optional[str] = None
    surbl: Optional[int] = None
    thumbnail: Optional[dict[str, Any]] = None
    users: Optional[list[Any]] = None
    version: Optional[float] = None


class Stats(BitlyModel):
    """Traffic and referrer data for a link."""

    clicks: Optional[int] = Field(default=None, description="Clicks across bit.ly")
    hash: Optional[str] = Field(default=None, description="Global hash")
    referrers: Optional[Any] = Field(default=None, description="Global referrers")
    userClicks: Optional[int] = Field(
        default=None, description="Clicks through this user's link"
    )
    userHash: Optional[str] = Field(default=None, description="User hash")
    userReferrers: Optional[Any] = Field(
        default=None, description="Referrers for this user's link"
    )

    @property
    def total_clicks(self) -> int:
        """
        Sum global and user-scoped clicks.

        Returns:
            clicks + userClicks, counting missing values as 0.
        """
        return (self.clicks or 0) + (self.userClicks or 0)


def parse_info(results: dict[str, Any]) -> dict[str, LinkInfo]:
    """
    Validate an info "results" mapping into LinkInfo views.

    Args:
        results: Mapping of hash to metadata dict.

    Returns:
        Mapping of hash to LinkInfo.
    """
    return {key: LinkInfo.model_validate(value) for key, value in results.items()}
