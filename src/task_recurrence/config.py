from datetime import timedelta
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from task_recurrence.expander import DEFAULT_MAX_COUNT, ExpansionOptions
from task_recurrence.preview import DEFAULT_PREVIEW_LIMIT


class Settings(BaseSettings):
    """Runtime configuration with environment variable support (``TASK_RECURRENCE_*``)."""

    model_config = SettingsConfigDict(env_prefix="TASK_RECURRENCE_")

    db_url: str = Field(default="sqlite+aiosqlite:///./tasks.db", description="SQLAlchemy async database URL")
    max_count: int = Field(default=DEFAULT_MAX_COUNT, ge=0, description="Cap on dates produced per expansion")
    preview_limit: int = Field(default=DEFAULT_PREVIEW_LIMIT, ge=0, description="Number of dates shown in a preview")
    horizon_days: Optional[int] = Field(default=None, ge=1, description="Bound for open-ended rules, one year when unset")

    def expansion_options(self) -> ExpansionOptions:
        horizon = timedelta(days=self.horizon_days) if self.horizon_days else None
        return ExpansionOptions(max_count=self.max_count, horizon=horizon)
