# backend/models/user.py
from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UserRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore")

    github_token: Optional[str] = None
    github_username: Optional[str] = None
