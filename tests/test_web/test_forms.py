"""Tests for form validation and template filters."""

from datetime import datetime

from agora.web.filters import human_time
from agora.web.models.forms import (
    CommentCreateForm,
    CommentUpdateForm,
    PostForm,
    UserCreate,
    parse_form,
)


class TestParseForm:
    def test_valid_post(self):
        form, error = parse_form(PostForm, {"title": "  Hello ", "body": "World"})
        assert error == ""
        assert form.title == "Hello"

    def test_title_too_long(self):
        form, error = parse_form(PostForm, {"title": "x" * 51, "body": "World"})
        assert form is None
        assert error.startswith("title:")

    def test_blank_body(self):
        form, error = parse_form(CommentUpdateForm, {"body": "   "})
        assert form is None
        assert "body" in error

    def test_comment_post_id_range(self):
        assert parse_form(CommentCreateForm, {"post_id": "7", "body": "hi"})[0].post_id == 7
        assert parse_form(CommentCreateForm, {"post_id": "0", "body": "hi"})[0] is None
        assert parse_form(CommentCreateForm, {"post_id": "abc", "body": "hi"})[0] is None

    def test_user_name_pattern(self):
        assert parse_form(UserCreate, {"name": "Jo 42", "email": "jo@example.com"})[0]
        assert parse_form(UserCreate, {"name": "J", "email": "jo@example.com"})[0] is None
        assert parse_form(UserCreate, {"name": "Jo!", "email": "jo@example.com"})[0] is None

    def test_user_email(self):
        form, error = parse_form(UserCreate, {"name": "Jo", "email": "jo@localhost"})
        assert form is None
        assert "Invalid email format" in error


class TestHumanTime:
    def test_datetime(self):
        assert human_time(datetime(2025, 1, 15, 10, 30, 5)) == "15/01/2025 10:30:05"

    def test_iso_string(self):
        assert human_time("2025-01-15 10:30:05.123456") == "15/01/2025 10:30:05"

    def test_empty_and_garbage(self):
        assert human_time(None) == ""
        assert human_time("yesterday") == "yesterday"
