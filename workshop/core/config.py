from datetime import date
from typing import Annotated, Any, Literal

from pydantic import BeforeValidator, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self


def parse_holidays(v: Any) -> list[str] | Any:
    if isinstance(v, str) and not v.startswith("["):
        return [i.strip() for i in v.split(",") if i.strip()]
    return v


def _hhmm_to_minutes(value: str) -> int:
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "Workshop Scheduler"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"

    DATABASE_URL: str = "sqlite://"

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "console"
    LOG_SQL: bool = False

    # Time grid
    OPENING_TIME: str = "07:00"
    CLOSING_TIME: str = "18:00"
    SLOT_MINUTES: int = 30

    # 7.5 hours of booked work per technician per day
    DAILY_TECHNICIAN_LIMIT_MINUTES: int = 450

    HOLIDAYS: Annotated[list[date] | str, BeforeValidator(parse_holidays)] = []

    @computed_field  # type: ignore[prop-decorator]
    @property
    def holiday_dates(self) -> frozenset[date]:
        if isinstance(self.HOLIDAYS, str):
            return frozenset()
        return frozenset(self.HOLIDAYS)

    @model_validator(mode="after")
    def _check_time_grid(self) -> Self:
        opening = _hhmm_to_minutes(self.OPENING_TIME)
        closing = _hhmm_to_minutes(self.CLOSING_TIME)
        if closing <= opening:
            raise ValueError("CLOSING_TIME must be after OPENING_TIME")
        if self.SLOT_MINUTES <= 0 or (closing - opening) % self.SLOT_MINUTES:
            raise ValueError(
                "Operating hours must divide evenly into SLOT_MINUTES slots"
            )
        return self


settings = Settings()  # type: ignore
