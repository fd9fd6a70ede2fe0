"""App Settings Schema — user preferences stored under the `settings` key."""

from pydantic import field_validator

from jobbook.schemas.base import CamelModel


class AppSettings(CamelModel):
    user_email: str = ""
    sms_only: bool = False

    @field_validator("user_email")
    @classmethod
    def strip_email(cls, v: str) -> str:
        return v.strip()
