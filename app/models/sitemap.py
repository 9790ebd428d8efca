from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class SitemapEntry(BaseModel):
    url: str
    last_modified: datetime
    change_frequency: Literal["always", "hourly", "daily", "weekly", "monthly", "yearly", "never"]
    priority: float = Field(ge=0.0, le=1.0)
