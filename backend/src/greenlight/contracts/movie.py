"""Movie record contract shared by the validator and the stores."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class Movie(BaseModel):
    """A movie resource plus its optimistic-concurrency version.

    Stores write generated values (id, created_at, version) back into the
    instance they are handed, so the model stays mutable.
    """

    id: int = 0
    created_at: datetime | None = Field(default=None, exclude=True)
    title: str = ""
    year: int = 0
    runtime: int = 0  # minutes
    genres: list[str] | None = None
    version: int = 0

    def to_public_dict(self) -> dict[str, Any]:
        """External representation: no created_at, empty optional fields dropped."""
        payload: dict[str, Any] = {"id": self.id, "title": self.title}
        if self.year:
            payload["year"] = self.year
        if self.runtime:
            payload["runtime"] = self.runtime
        if self.genres:
            payload["genres"] = list(self.genres)
        payload["version"] = self.version
        return payload
