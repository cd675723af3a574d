"""
Immutable widget base and override sequences.

Widgets are configured with "with" methods: each call returns a modified
copy and leaves the receiver untouched, so a configured widget can be
shared and specialized freely::

    base = Text(form, "name").container_class("field")
    wide = base.input_class("wide")   # base is unchanged

Override sequences are ordered ``(method_name, args)`` pairs replayed
against a widget. They let configuration loaders (factory options, Django
settings) describe widget setup as data.
"""

from __future__ import annotations

import copy
import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from django.utils.safestring import SafeString

from . import html
from .exceptions import InvalidConfiguration

logger = logging.getLogger(__name__)

W = TypeVar("W", bound="Widget")

Override = tuple[str, tuple[Any, ...]]

# Public methods that produce output rather than configuration
NON_CONFIGURATION_METHODS = frozenset({"render", "begin", "end"})


class Widget:
    """Base class for every renderable widget."""

    def __init__(self) -> None:
        self._attributes: dict[str, Any] = {}

    def _clone(self: W, **changes: Any) -> W:
        new = copy.copy(self)
        new.__dict__.update(changes)
        return new

    def attributes(self: W, attributes: Mapping[str, Any]) -> W:
        """Replace the HTML attributes of the main tag."""
        return self._clone(_attributes=dict(attributes))

    def add_attributes(self: W, attributes: Mapping[str, Any]) -> W:
        """Merge HTML attributes into the main tag's attributes."""
        return self._clone(_attributes=html.merge_attributes(self._attributes, attributes))

    def add_class(self: W, value: html.ClassValue) -> W:
        return self._clone(_attributes=html.add_class(self._attributes, value))

    def replace_class(self: W, value: html.ClassValue) -> W:
        """Set the class of the main tag; ``None`` removes it."""
        return self._clone(_attributes=html.set_class(self._attributes, value))

    def id(self: W, value: str | None) -> W:
        return self._clone(_attributes={**self._attributes, "id": value})

    def render(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return str(self.render())

    def __html__(self) -> str:
        return SafeString(self.render())


def normalize_overrides(value: Any) -> list[Override]:
    """
    Normalize an override sequence.

    Accepts a mapping ``{method: args}`` or a sequence of ``(method, args)``
    pairs. A list or tuple of args is the positional argument list; any
    other value is passed as the single argument.
    """
    if value is None:
        return []
    items = value.items() if isinstance(value, Mapping) else value
    overrides = []
    for item in items:
        if isinstance(item, str) or not isinstance(item, Sequence) or len(item) != 2:
            raise InvalidConfiguration(f"Override must be a (method, args) pair, got {item!r}.")
        method, args = item
        if not isinstance(method, str):
            raise InvalidConfiguration(f"Override method name must be a string, got {method!r}.")
        if not isinstance(args, (list, tuple)):
            args = (args,)
        overrides.append((method, tuple(args)))
    return overrides


def check_overrides(widget_class: type[Widget], overrides: Any) -> list[Override]:
    """
    Normalize ``overrides`` and check them against ``widget_class``.

    Every named method must be a configuration method of the class, and the
    arguments must fit its signature.
    """
    overrides = normalize_overrides(overrides)
    for method_name, args in overrides:
        if not _is_configuration_method(widget_class, method_name):
            raise InvalidConfiguration(f'{widget_class.__name__} has no configuration method "{method_name}".')
        try:
            inspect.signature(getattr(widget_class, method_name)).bind(None, *args)
        except TypeError as e:
            raise InvalidConfiguration(
                f"{widget_class.__name__}.{method_name}() cannot be called with arguments {args!r} ({e})."
            ) from None
    return overrides


def apply_overrides(widget: W, overrides: Any) -> W:
    """Replay an override sequence against ``widget`` and return the result."""
    for method_name, args in check_overrides(type(widget), overrides):
        method = getattr(widget, method_name)
        logger.debug("Applying %s.%s%r", type(widget).__name__, method_name, args)
        result = method(*args)
        if not isinstance(result, Widget):
            raise InvalidConfiguration(
                f'{type(widget).__name__}.{method_name}() does not return a widget and cannot be used as an override.'
            )
        widget = result
    return widget


def _is_configuration_method(widget_class: type[Widget], name: str) -> bool:
    if name.startswith("_") or name in NON_CONFIGURATION_METHODS:
        return False
    return callable(getattr(widget_class, name, None))
