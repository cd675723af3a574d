"""Pytest configuration for formfields tests."""

from collections.abc import Callable, Iterable
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Literal

import pytest
from pydantic import BaseModel, ConfigDict, Field

from formfields import FormModel, NotBlank


def pytest_configure() -> None:
    """Configure minimal Django settings for template rendering."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            DATABASES={},
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
            ],
            TEMPLATES=[
                {
                    "BACKEND": "django.template.backends.django.DjangoTemplates",
                    "DIRS": [],
                    "APP_DIRS": False,
                    "OPTIONS": {
                        "context_processors": [],
                    },
                }
            ],
            USE_TZ=True,
        )
        django.setup()


# ---------------------------------------------------------------------------
# Sample form models
# ---------------------------------------------------------------------------


class TextSchema(BaseModel):
    name: NotBlank = Field(
        default="",
        description="Input your full name.",
        json_schema_extra={"placeholder": "Typed your name here"},
    )
    company: NotBlank = ""
    job: str = ""


class TextForm(FormModel):
    class Meta:
        schema = TextSchema


class Owner:
    """Arbitrary object a checkbox cannot represent."""


class CheckboxSchema(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    red: bool = Field(default=True, title="Red color", description="If need red color.")
    blue: bool = Field(default=False, title="Blue color")
    age: int = Field(default=42, title="Your age 42?")
    tags: list[str] = Field(default_factory=lambda: ["a", "b"])
    owner: Any = Field(default_factory=Owner)


class CheckboxForm(FormModel):
    class Meta:
        schema = CheckboxSchema


class ErrorSummarySchema(BaseModel):
    name: NotBlank = ""
    age: int = Field(default=0, ge=18)


class ErrorSummaryForm(FormModel):
    class Meta:
        schema = ErrorSummarySchema


class Color(str, Enum):
    """Sample enum for testing select choices."""

    DARK_RED = "dark_red"
    BLUE = "blue"


class ProfileSchema(BaseModel):
    nickname: str = Field(default="", min_length=2, max_length=16, pattern=r"^\w+$")
    bio: str = Field(default="", max_length=200, json_schema_extra={"placeholder": "About you"})
    rating: int | None = Field(default=None, ge=1, le=5, multiple_of=1)
    born: date | None = Field(default=None, ge=date(1900, 1, 1))
    size: Literal["s", "m", "l"] = "m"
    color: Color | None = None
    token: str = "abc"
    email: str


class ProfileForm(FormModel):
    class Meta:
        schema = ProfileSchema
        form_name = "Profile"


def validated(form: FormModel) -> FormModel:
    """Run validation and return the form, for one-line fixtures."""
    form.validate()
    return form


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def html_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for static HTML files."""
    html_path = tmp_path / "html"
    html_path.mkdir(exist_ok=True)
    return html_path


@pytest.fixture
def render_fields_to_file(html_dir: Path) -> Callable:
    """Render fields to a static HTML file.

    Returns a callable that accepts rendered fields and an optional filename,
    writes a complete HTML document to the temporary directory, and returns
    the file path.
    """

    def _render(fields: Iterable[Any], filename: str = "form.html") -> Path:
        body = "\n".join(str(field) for field in fields)
        html_content = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>formfields test</title>
</head>
<body>
    <form method="post" id="test-form">
        {body}
        <button type="submit">Submit</button>
    </form>
</body>
</html>
"""
        file_path = html_dir / filename
        file_path.write_text(html_content)
        return file_path

    return _render


@pytest.fixture
def page_from_file(page):
    """Navigate a Playwright page to a local file.

    Returns a callable that accepts a file path, navigates to it using
    the file:// protocol, and returns the page ready for assertions.
    """

    def _navigate(file_path: Path):
        page.goto(f"file://{file_path.absolute()}")
        return page

    return _navigate
