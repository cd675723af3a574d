"""Label, hint and error widgets rendered as parts of a field."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from django.utils.safestring import SafeString

from . import helpers, html
from .models import FormModel
from .widget import Widget


class FieldPart(Widget):
    """A single tag whose content is resolved from a model attribute."""

    default_tag = "div"

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__()
        self.model = model
        self.attribute = attribute
        self._tag = self.default_tag
        self._content: str | None = None

    def resolve_content(self) -> str:
        raise NotImplementedError

    def prepare_attributes(self) -> dict[str, Any]:
        return dict(self._attributes)

    def render(self) -> SafeString:
        content = self._content if self._content is not None else self.resolve_content()
        if not content:
            return SafeString("")
        return html.tag(self._tag, content, self.prepare_attributes())


class Label(FieldPart):
    """
    The label of an attribute.

    The ``for`` attribute points at the input id: the id given with
    ``for_id()`` if any, otherwise the id derived from the model unless
    ``use_input_id(False)``. ``set_for(False)`` drops it altogether.
    """

    default_tag = "label"

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._for_id: str | None = None
        self._set_for = True
        self._use_input_id = True

    def for_id(self, value: str | None):
        return self._clone(_for_id=value)

    def set_for(self, value: bool = True):
        return self._clone(_set_for=value)

    def use_input_id(self, value: bool = True):
        return self._clone(_use_input_id=value)

    def content(self, value: str | None):
        """Use ``value`` instead of the attribute label."""
        return self._clone(_content=value)

    def resolve_content(self) -> str:
        return helpers.get_label(self.model, self.attribute)

    def prepare_attributes(self) -> dict[str, Any]:
        attributes = dict(self._attributes)
        if not self._set_for or "for" in attributes:
            return attributes
        for_id = self._for_id
        if for_id is None and self._use_input_id:
            for_id = helpers.get_input_id(self.model, self.attribute)
        if for_id is not None:
            attributes["for"] = for_id
        return attributes


class BlockPart(FieldPart):
    """A part whose wrapping tag can be changed."""

    def tag(self, name: str):
        if not name:
            raise ValueError("Tag name cannot be empty.")
        return self._clone(_tag=name)


class Hint(BlockPart):
    def content(self, value: str | None):
        """Use ``value`` instead of the attribute hint."""
        return self._clone(_content=value)

    def resolve_content(self) -> str:
        return helpers.get_hint(self.model, self.attribute)


class Error(BlockPart):
    """The first validation error of an attribute."""

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._message_callback: Callable[[str, FormModel, str], str] | None = None

    def message(self, value: str | None):
        """Show ``value`` instead of the model's error (only when there is one)."""
        return self._clone(_content=value)

    def message_callback(self, callback: Callable[[str, FormModel, str], str] | None):
        """Transform the error message with ``callback(message, model, attribute)``."""
        return self._clone(_message_callback=callback)

    def resolve_content(self) -> str:
        return helpers.get_first_error(self.model, self.attribute)

    def render(self) -> SafeString:
        error = self.resolve_content()
        if not error:
            return SafeString("")
        message = self._content if self._content is not None else error
        if self._message_callback is not None:
            message = self._message_callback(message, self.model, self.attribute)
        return html.tag(self._tag, message, self.prepare_attributes())
