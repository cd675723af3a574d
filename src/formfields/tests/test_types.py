"""Tests for rule markers."""

import typing

import pytest
from pydantic import BaseModel, BeforeValidator, ValidationError

from formfields import NotBlank
from formfields.types import is_not_blank_marker, not_blank


class TestNotBlankType:
    """Test NotBlank type annotation."""

    def test_has_annotated_structure_with_validator(self):
        """NotBlank is Annotated[str, BeforeValidator(not_blank)]."""
        args = typing.get_args(NotBlank)

        assert typing.get_origin(NotBlank) is typing.Annotated
        assert args[0] is str
        assert isinstance(args[1], BeforeValidator)
        assert is_not_blank_marker(args[1])

    def test_other_validators_are_not_markers(self):
        """Only the not_blank validator is recognized."""
        assert not is_not_blank_marker(BeforeValidator(str.strip))
        assert not is_not_blank_marker("not_blank")


class TestPydanticIntegration:
    """Test that NotBlank works with Pydantic models."""

    class Schema(BaseModel):
        name: NotBlank = ""

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None])
    def test_rejects_blank_values(self, value):
        """Empty, whitespace-only and None values fail with a not_blank error."""
        with pytest.raises(ValidationError) as exc_info:
            self.Schema(name=value)

        error = exc_info.value.errors()[0]
        assert error["type"] == "not_blank"
        assert error["msg"] == "Value cannot be blank."

    def test_accepts_text(self):
        """Non-blank text passes unchanged."""
        assert self.Schema(name=" Anna ").name == " Anna "

    def test_keeps_marker_in_field_metadata(self):
        """The marker stays reachable from the model's field info."""
        metadata = self.Schema.model_fields["name"].metadata

        assert any(is_not_blank_marker(meta) for meta in metadata)

    def test_not_blank_returns_value(self):
        """The validator passes non-string values through."""
        assert not_blank(0) == 0
