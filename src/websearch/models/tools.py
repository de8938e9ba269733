from __future__ import annotations

from pydantic import BaseModel, field_validator


class ScrapeWebsiteInput(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("url must not be empty")
        if len(v) > 2048:
            raise ValueError("url must not exceed 2048 characters")
        return v
