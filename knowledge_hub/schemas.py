from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, BeforeValidator, EmailStr, Field, field_validator

Role = Literal["admin", "employee"]
ArticleStatus = Literal["draft", "published"]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Forms post "" for untouched optional inputs.
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]


class UserCreate(BaseModel):
    username: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=255)
    email: EmailStr
    full_name: str = Field(min_length=2, max_length=255)
    role: Role = "employee"


class UserUpdate(BaseModel):
    email: EmailStr | None = None
    full_name: str | None = Field(default=None, min_length=2, max_length=255)
    role: Role | None = None

    @field_validator("email", "full_name", "role")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    full_name: str
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: OptionalText = None
    color: str = Field(default="#3b82f6", pattern=r"^#[0-9a-fA-F]{6}$")


class CategoryUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: OptionalText = None
    color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")

    @field_validator("name", "color")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class CategoryOut(BaseModel):
    id: str
    name: str
    description: str | None = None
    color: str
    created_at: datetime

    class Config:
        from_attributes = True


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TagUpdate(BaseModel):
    name: str = Field(min_length=1, max_length=255)


class TagOut(BaseModel):
    id: str
    name: str
    created_at: datetime

    class Config:
        from_attributes = True


class ArticleCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: OptionalText = None
    cover_image: OptionalText = None
    status: ArticleStatus = "draft"
    category_id: OptionalText = None
    tag_ids: list[str] | None = None


class ArticleUpdate(BaseModel):
    """Patch body: only these fields can be changed after creation."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    excerpt: OptionalText = None
    cover_image: OptionalText = None
    status: ArticleStatus | None = None
    category_id: OptionalText = None
    tag_ids: list[str] | None = None

    @field_validator("title", "content", "status")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ArticleOut(BaseModel):
    id: str
    title: str
    content: str
    excerpt: str | None = None
    cover_image: str | None = None
    status: str
    category_id: str | None = None
    author_id: str
    views: int
    created_at: datetime
    updated_at: datetime
    published_at: datetime | None = None

    class Config:
        from_attributes = True


class ArticleDetailOut(ArticleOut):
    author: UserOut
    category: CategoryOut | None = None
    tags: list[TagOut]


class DashboardStats(BaseModel):
    total_articles: int
    published_articles: int
    draft_articles: int
    total_employees: int
    total_views: int
    total_categories: int


class MessageOut(BaseModel):
    success: bool = True
