"""
Rule markers for use in the Pydantic schemas of form models.

Usage:
    from pydantic import BaseModel, Field
    from formfields import NotBlank

    class ContactSchema(BaseModel):
        name: NotBlank = Field(default="", description="Input your full name.")

A ``NotBlank`` attribute fails validation with "Value cannot be blank." when
its value is ``None``, an empty string or only whitespace. Fields rendered
with rule enrichment enabled receive the HTML ``required`` attribute.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator
from pydantic_core import PydanticCustomError


def not_blank(value: Any) -> Any:
    """Reject ``None``, empty and whitespace-only values."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("not_blank", "Value cannot be blank.")
    return value


def is_not_blank_marker(metadata: Any) -> bool:
    """Whether a FieldInfo metadata entry is the ``NotBlank`` rule."""
    return isinstance(metadata, BeforeValidator) and metadata.func is not_blank


# Marker type for required text attributes.
# Runs before type validation so that None is reported as blank rather than
# as a type error.
NotBlank = Annotated[str, BeforeValidator(not_blank)]
