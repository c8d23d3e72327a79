from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# --- Auth ---

class RegisterRequest(BaseModel):
    name: str = Field(max_length=150)
    email: EmailStr
    password: str = Field(min_length=6)

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Name must be at least 2 characters")
        return value


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class UserPublic(BaseModel):
    id: int
    name: str
    email: str
    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    token: str
    user: UserPublic


# --- Comment ---

class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Content is required")
        return value


class CommentResponse(BaseModel):
    id: int
    content: str
    author: UserPublic | None = None
    created_at: datetime


# --- Post ---

class PostCreate(BaseModel):
    title: str = Field(max_length=300)
    content: str

    @field_validator("title", "content")
    @classmethod
    def _not_blank(cls, value: str, info) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name.capitalize()} is required")
        return value.strip() if info.field_name == "title" else value


class PostUpdate(BaseModel):
    """
    Partial update.  Only keys present in the request body are applied
    (``model_dump(exclude_unset=True)``); an explicit empty string is a
    real value and overwrites, an explicit ``null`` is rejected.
    """

    title: str | None = Field(None, max_length=300)
    content: str | None = None

    @field_validator("title", "content")
    @classmethod
    def _reject_null(cls, value: str | None, info) -> str:
        if value is None:
            raise ValueError(f"{info.field_name.capitalize()} cannot be null")
        return value.strip() if info.field_name == "title" else value


class PostSummary(BaseModel):
    id: int
    title: str
    content: str
    author: UserPublic | None = None
    comment_count: int
    created_at: datetime
    updated_at: datetime


class PostDetail(BaseModel):
    id: int
    title: str
    content: str
    author: UserPublic | None = None
    comments: list[CommentResponse] = []
    created_at: datetime
    updated_at: datetime


class MessageResponse(BaseModel):
    message: str
