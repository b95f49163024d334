from datetime import datetime

from pydantic import BaseModel, Field, model_validator

MAX_TITLE_LENGTH = 255


class PostCreate(BaseModel):
    title: str = Field(..., max_length=MAX_TITLE_LENGTH, description="Post title")
    content: str = Field(..., description="Post content")


class PostReplace(BaseModel):
    """Full replacement of a post; every field must be sent."""

    title: str = Field(..., max_length=MAX_TITLE_LENGTH, description="New post title")
    content: str = Field(..., description="New post content")
    published: bool = Field(..., description="New publication status")


class PostPatch(BaseModel):
    """Partial update; only the fields that are set get written."""

    title: str | None = Field(None, max_length=MAX_TITLE_LENGTH, description="New post title")
    content: str | None = Field(None, description="New post content")
    published: bool | None = Field(None, description="New publication status")

    @model_validator(mode="after")
    def _reject_explicit_nulls(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class PostOut(BaseModel):
    id: int = Field(..., description="Post ID")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Post content")
    published: bool = Field(..., description="Publication status")
    created_at: datetime | None = Field(None, description="Post creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    model_config = {"from_attributes": True}
