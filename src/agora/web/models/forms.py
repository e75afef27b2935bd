"""Pydantic models validating submitted forms."""

from typing import Any, Mapping

from pydantic import BaseModel, Field, ValidationError, field_validator


class PostForm(BaseModel):
    """Create/update post form."""

    title: str = Field(min_length=1, max_length=50)
    body: str = Field(min_length=1, max_length=5000)

    @field_validator("title", "body", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class CommentCreateForm(BaseModel):
    """New comment form. ``post_id`` travels as a hidden field."""

    post_id: int = Field(ge=1, le=1_000_000_000)
    body: str = Field(min_length=1, max_length=5000)

    @field_validator("body", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class CommentUpdateForm(BaseModel):
    body: str = Field(min_length=1, max_length=5000)

    @field_validator("body", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value


class UserCreate(BaseModel):
    """Payload for creating a user from the CLI."""

    name: str = Field(pattern=r"^[a-zA-Z0-9 ]{2,16}$")
    email: str = Field(min_length=3, max_length=255)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        if not local or "." not in domain:
            raise ValueError("Invalid email format")
        return value


def parse_form(model: type[BaseModel], data: Mapping[str, Any]) -> tuple[Any, str]:
    """Validate form data, returning ``(model, "")`` or ``(None, message)``."""
    try:
        return model.model_validate(dict(data)), ""
    except ValidationError as e:
        messages = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            messages.append(f"{field}: {err['msg']}")
        return None, "; ".join(messages)
