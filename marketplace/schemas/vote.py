"""Pydantic схемы для голосования"""
from pydantic import BaseModel, Field, field_validator

from marketplace.core.constants import MAX_ID_LENGTH
from marketplace.schemas.order import validate_identifier


class VoteCreateSchema(BaseModel):
    """Голос пользователя за объект"""

    subject_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH)
    user_id: str = Field(..., min_length=1, max_length=MAX_ID_LENGTH)
    is_upvote: bool = Field(..., description="True - за, False - против")

    @field_validator("subject_id", "user_id")
    @classmethod
    def validate_ids(cls, v: str, info) -> str:
        return validate_identifier(v, info.field_name)

    class Config:
        str_strip_whitespace = True
