"""
HTML attribute handling and tag building.

Attribute bags are plain dicts. Every helper here is pure: it returns a new
dict and never touches the one it was given. The ``class`` attribute is
special-cased so that classes accumulate instead of being overwritten.

Escaping is delegated to Django (``format_html`` / ``conditional_escape``),
so fragments that are already safe (other rendered tags) pass through
unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from django.utils.html import conditional_escape, format_html
from django.utils.safestring import SafeString, mark_safe

# Attributes listed here are rendered first, in this order. Everything else
# keeps its insertion order.
ATTRIBUTE_ORDER: tuple[str, ...] = (
    "type",
    "id",
    "class",
    "name",
    "value",
    "href",
    "loading",
    "src",
    "srcset",
    "sizes",
    "action",
    "method",
    "selected",
    "checked",
    "readonly",
    "disabled",
    "multiple",
    "size",
    "maxlength",
    "minlength",
    "width",
    "height",
    "rows",
    "cols",
    "alt",
    "title",
    "rel",
    "media",
)

ClassValue = str | Iterable[str] | None


def _join_class(value: ClassValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return " ".join(str(item) for item in value)


# Attribute/class accumulator


def set_class(attributes: Mapping[str, Any], value: ClassValue) -> dict[str, Any]:
    """
    Return a copy of ``attributes`` with ``class`` replaced by ``value``.

    ``None`` removes the key, a list is joined with single spaces and a
    string is used verbatim.
    """
    result = dict(attributes)
    joined = _join_class(value)
    if joined is None:
        result.pop("class", None)
    else:
        result["class"] = joined
    return result


def add_class(attributes: Mapping[str, Any], value: ClassValue) -> dict[str, Any]:
    """Return a copy of ``attributes`` with ``value`` appended to ``class``."""
    joined = _join_class(value)
    if not joined:
        return dict(attributes)
    current = _join_class(attributes.get("class"))
    return set_class(attributes, f"{current} {joined}" if current else joined)


def merge_attributes(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """
    Merge two attribute bags.

    Keys of ``override`` replace keys of ``base``, except ``class`` which is
    concatenated (base classes first, no de-duplication).
    """
    result = dict(base)
    for name, value in override.items():
        if name == "class" and "class" in result:
            result = add_class(result, value)
        elif name == "class":
            result = set_class(result, value)
        else:
            result[name] = value
    return result


def sort_attributes(attributes: Mapping[str, Any]) -> dict[str, Any]:
    ordered = {name: attributes[name] for name in ATTRIBUTE_ORDER if name in attributes}
    for name, value in attributes.items():
        if name not in ordered:
            ordered[name] = value
    return ordered


# Tag builder


def render_attributes(attributes: Mapping[str, Any]) -> SafeString:
    """
    Render an attribute bag as a string with a leading space per attribute.

    ``None`` and ``False`` omit the attribute, ``True`` renders it bare.
    """
    rendered = []
    for name, value in sort_attributes(attributes).items():
        if value is None or value is False:
            continue
        if value is True:
            rendered.append(format_html(" {}", name))
            continue
        if name == "class" and not isinstance(value, str):
            value = _join_class(value)
        rendered.append(format_html(' {}="{}"', name, value))
    return mark_safe("".join(rendered))


def open_tag(name: str, attributes: Mapping[str, Any] | None = None) -> SafeString:
    return format_html("<{}{}>", name, render_attributes(attributes or {}))


def close_tag(name: str) -> SafeString:
    return format_html("</{}>", name)


def void_tag(name: str, attributes: Mapping[str, Any] | None = None) -> SafeString:
    """Render a tag without content or closing tag, such as ``<input>``."""
    return open_tag(name, attributes)


def tag(name: str, content: Any = "", attributes: Mapping[str, Any] | None = None) -> SafeString:
    """Render ``<name attributes>content</name>``, escaping unsafe content."""
    return format_html(
        "{}{}{}",
        open_tag(name, attributes),
        conditional_escape(content),
        close_tag(name),
    )


def join_lines(lines: Iterable[Any]) -> SafeString:
    """Join fragments with newlines, escaping those that are not already safe."""
    return mark_safe("\n".join(str(conditional_escape(line)) for line in lines))
