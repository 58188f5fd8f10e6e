"""
Pydantic v2 models for catalog entries, favorites and user profiles.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .utils import secure_url, thumbnail_url


class Thumbnail(BaseModel):
    """Image reference as returned by the catalog (base path + extension)."""
    model_config = ConfigDict(frozen=True)

    path: Optional[str] = None
    extension: Optional[str] = None

    @property
    def url(self) -> str:
        return thumbnail_url(self.path, self.extension)


class CatalogEntry(BaseModel):
    """One character of the catalog. Immutable once fetched."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: Optional[str] = ""
    description: Optional[str] = ""
    thumbnail: Optional[Thumbnail] = None

    @property
    def display_name(self) -> str:
        return self.name or ""

    @property
    def thumbnail_url(self) -> str:
        return self.thumbnail.url if self.thumbnail else ""

    def to_public(self) -> dict:
        """Flat dict for JSON responses."""
        return {
            "id": self.id,
            "name": self.display_name,
            "description": self.description or "",
            "thumbnail": self.thumbnail_url,
        }


class Favorite(BaseModel):
    """Favorite as stored by the backend (denormalized name + thumbnail)."""
    model_config = ConfigDict(populate_by_name=True)

    marvel_id: int = Field(alias="marvelId")
    name: str = ""
    thumbnail: str = ""
    added_at: Optional[datetime] = Field(default=None, alias="addedAt")

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "Favorite":
        return cls(
            marvel_id=entry.id,
            name=entry.display_name,
            thumbnail=entry.thumbnail_url,
            added_at=datetime.now(),
        )

    @property
    def thumbnail_url(self) -> str:
        return secure_url(self.thumbnail)

    def to_public(self) -> dict:
        data = self.model_dump(by_alias=True, mode="json")
        data["thumbnail"] = self.thumbnail_url
        return data


class UserProfile(BaseModel):
    """User record mirrored in the backend after authentication."""
    model_config = ConfigDict(populate_by_name=True)

    firebase_uid: str = Field(alias="firebaseUid")
    email: str = ""
    display_name: Optional[str] = Field(default=None, alias="displayName")

    @model_validator(mode="after")
    def _default_display_name(self) -> "UserProfile":
        # Fall back to the local part of the email
        if not self.display_name and self.email:
            self.display_name = self.email.split("@")[0]
        return self
