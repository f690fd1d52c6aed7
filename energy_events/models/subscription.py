"""Email subscription record."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class Subscription(BaseModel):
    """An email address subscribed to feed digests."""

    email: str
    subscribed_at: str = Field(
        default_factory=lambda: datetime.now().isoformat(timespec="seconds")
    )
    active: bool = True

    class Config:
        extra = "ignore"

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = (value or "").strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError(f"invalid email address: {value!r}")
        return value
