from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class RevalidateRequest(BaseModel):
    secret: Optional[str] = None
    slug: Optional[str] = Field(default=None, description="Slug of the changed post, if any.")
    type: str = Field(default="post", description="Content type of the change.")


class InvalidatedPaths(BaseModel):
    revalidated: bool
    now: int = Field(description="Server time in epoch milliseconds.")
    paths: List[str]
    method: Literal["POST", "GET"] = "POST"
