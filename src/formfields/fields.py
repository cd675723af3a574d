"""
Fields: a widget composed with its label, hint and error inside a container.

Rendering a field resolves everything from the form model first, then
substitutes the rendered parts into the template::

    {label}
    {input}
    {hint}
    {error}

Lines left empty by parts that rendered nothing are removed, and the result
is wrapped in the container tag (``<div>`` by default).

Class hierarchy:
    BaseField     container handling
    PartsField    template with {label}, {input}, {hint}, {error}
    InputField    bound to a model attribute; input id, name, rules, valid/invalid class
    PlaceholderField  InputField with a placeholder (Text and its variants, Textarea)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from django.utils.html import format_html
from django.utils.safestring import SafeString, mark_safe

from . import helpers, html
from .exceptions import InvalidInputType
from .models import FormModel
from .parts import Error, Hint, Label
from .widget import Widget, apply_overrides, check_overrides

DEFAULT_TEMPLATE = "{label}\n{input}\n{hint}\n{error}"

PLACEHOLDER_PATTERN = re.compile(r"\{(?:label|input|hint|error)\}")
BLANK_LINE_PATTERN = re.compile(r"^[ \t]*[\r\n]+", re.MULTILINE)


def render_template(template: str, parts: Mapping[str, str]) -> SafeString:
    """
    Substitute rendered parts into a template.

    Placeholders missing from ``parts`` render empty. The result is stripped
    and lines containing only whitespace are dropped.
    """
    content = PLACEHOLDER_PATTERN.sub(lambda m: str(parts.get(m.group(0), "")), template)
    return mark_safe(BLANK_LINE_PATTERN.sub("", content.strip()))


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, Decimal, Enum))


def stringify(value: Any) -> str:
    """String form used for comparisons: True is "1", False and None are ""."""
    if isinstance(value, Enum):
        value = value.value
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    return str(value)


# Base classes


class BaseField(Widget):
    def __init__(self) -> None:
        super().__init__()
        self._container_tag: str | None = "div"
        self._container_attributes: dict[str, Any] = {}
        self._use_container = True

    def container_tag(self, name: str | None):
        """Tag wrapping the field; ``None`` renders the field without a container."""
        if name == "":
            raise ValueError("Tag name cannot be empty.")
        return self._clone(_container_tag=name)

    def container_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(_container_attributes=dict(attributes))

    def add_container_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(
            _container_attributes=html.merge_attributes(self._container_attributes, attributes)
        )

    def container_id(self, value: str | None):
        return self._clone(_container_attributes={**self._container_attributes, "id": value})

    def container_class(self, value: html.ClassValue):
        return self._clone(_container_attributes=html.set_class(self._container_attributes, value))

    def add_container_class(self, value: html.ClassValue):
        return self._clone(_container_attributes=html.add_class(self._container_attributes, value))

    def use_container(self, value: bool = True):
        return self._clone(_use_container=value)

    def generate_content(self) -> str:
        raise NotImplementedError

    def prepare_container_attributes(self) -> dict[str, Any]:
        return dict(self._container_attributes)

    def has_container(self) -> bool:
        return self._use_container and self._container_tag is not None

    def render_container_begin(self) -> SafeString:
        if not self.has_container():
            return SafeString("")
        return format_html("{}\n", html.open_tag(self._container_tag, self.prepare_container_attributes()))

    def render_container_end(self) -> SafeString:
        if not self.has_container():
            return SafeString("")
        return format_html("\n{}", html.close_tag(self._container_tag))

    def render(self) -> SafeString:
        content = self.generate_content()
        if not content:
            return SafeString("")
        return mark_safe(f"{self.render_container_begin()}{content}{self.render_container_end()}")


class PartsField(BaseField):
    def __init__(self) -> None:
        super().__init__()
        self._template = DEFAULT_TEMPLATE
        self._label_config: tuple = ()
        self._hint_config: tuple = ()
        self._error_config: tuple = ()

    def template(self, value: str):
        return self._clone(_template=value)

    def label_config(self, overrides: Any):
        """Override sequence applied to the label part, e.g. ``[("set_for", [False])]``."""
        return self._clone(_label_config=tuple(check_overrides(Label, overrides)))

    def hint_config(self, overrides: Any):
        return self._clone(_hint_config=tuple(check_overrides(Hint, overrides)))

    def error_config(self, overrides: Any):
        return self._clone(_error_config=tuple(check_overrides(Error, overrides)))

    def generate_input(self) -> str:
        raise NotImplementedError

    def generate_label(self) -> str:
        return ""

    def generate_hint(self) -> str:
        return ""

    def generate_error(self) -> str:
        return ""

    def generate_content(self) -> SafeString:
        # The input goes first so an unusable value fails before anything else is built
        parts = {"{input}": self.generate_input()}
        parts["{label}"] = self.generate_label()
        parts["{hint}"] = self.generate_hint()
        parts["{error}"] = self.generate_error()
        return render_template(self._template, parts)


class InputField(PartsField):
    """
    A field bound to one attribute of a form model.

    ``attributes()`` and ``input_attributes()`` both configure the input
    tag; the container is configured with the ``container_*`` methods.
    """

    # HTML validation attributes this field accepts from the schema's rules
    supported_rules: tuple[str, ...] = ("required",)

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__()
        self.model = model
        self.attribute = attribute
        self._set_input_id = True
        self._enrichment_from_rules = False
        self._valid_class: str | None = None
        self._invalid_class: str | None = None

    def input_attributes(self, attributes: Mapping[str, Any]):
        return self.attributes(attributes)

    def add_input_attributes(self, attributes: Mapping[str, Any]):
        return self.add_attributes(attributes)

    def input_class(self, value: html.ClassValue):
        return self.replace_class(value)

    def add_input_class(self, value: html.ClassValue):
        return self.add_class(value)

    def input_id(self, value: str | None):
        return self.id(value)

    def set_input_id(self, value: bool = True):
        """Whether to give the input the id derived from the model."""
        return self._clone(_set_input_id=value)

    def enrichment_from_rules(self, value: bool = True):
        """Whether to add HTML validation attributes derived from the schema."""
        return self._clone(_enrichment_from_rules=value)

    def valid_class(self, value: str | None):
        """Container class added when the validated attribute has no errors."""
        return self._clone(_valid_class=value)

    def invalid_class(self, value: str | None):
        """Container class added when the validated attribute has errors."""
        return self._clone(_invalid_class=value)

    # Model data

    def get_value(self) -> Any:
        return helpers.get_value(self.model, self.attribute)

    def get_input_name(self) -> str:
        return helpers.get_input_name(self.model, self.attribute)

    def get_input_id(self) -> str | None:
        if "id" in self._attributes:
            return self._attributes["id"]
        if self._set_input_id:
            return helpers.get_input_id(self.model, self.attribute)
        return None

    def ensure_scalar(self, value: Any) -> Any:
        if not is_scalar(value):
            raise InvalidInputType(
                f'"{type(self).__name__}" field requires a string, numeric or None value, '
                f"got {type(value).__name__}."
            )
        return value

    def prepare_input_attributes(self, **defaults: Any) -> dict[str, Any]:
        """
        Build the input tag's attributes.

        ``defaults`` and rule-derived attributes are overridden by attributes
        configured on the field.
        """
        attributes: dict[str, Any] = dict(defaults)
        if self._enrichment_from_rules:
            rules = helpers.get_rules(self.model, self.attribute)
            attributes.update((name, value) for name, value in rules.items() if name in self.supported_rules)
        attributes.update(self._attributes)
        attributes["id"] = self.get_input_id()
        attributes.setdefault("name", self.get_input_name())
        return attributes

    # Parts

    def generate_label(self) -> str:
        label = Label(self.model, self.attribute).use_input_id(False).for_id(self.get_input_id())
        return apply_overrides(label, self._label_config).render()

    def generate_hint(self) -> str:
        return apply_overrides(Hint(self.model, self.attribute), self._hint_config).render()

    def generate_error(self) -> str:
        return apply_overrides(Error(self.model, self.attribute), self._error_config).render()

    def prepare_container_attributes(self) -> dict[str, Any]:
        attributes = super().prepare_container_attributes()
        if self.model.is_validated:
            if helpers.has_errors(self.model, self.attribute):
                css = self._invalid_class
            else:
                css = self._valid_class
            if css:
                attributes = html.add_class(attributes, css)
        return attributes


class PlaceholderField(InputField):
    """An input with a placeholder taken from the schema (``json_schema_extra``) or set explicitly."""

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._placeholder: str | None = None
        self._use_placeholder = True

    def placeholder(self, value: str | None):
        return self._clone(_placeholder=value)

    def use_placeholder(self, value: bool = True):
        return self._clone(_use_placeholder=value)

    def resolve_placeholder(self) -> str | None:
        if not self._use_placeholder:
            return None
        if self._placeholder is not None:
            return self._placeholder
        return helpers.get_placeholder(self.model, self.attribute) or None


# Inputs


class Text(PlaceholderField):
    input_type = "text"
    supported_rules = ("required", "minlength", "maxlength", "pattern")

    def format_value(self, value: Any) -> str:
        return "" if value is None else stringify(value)

    def generate_input(self) -> SafeString:
        value = self.ensure_scalar(self.get_value())
        attributes = self.prepare_input_attributes(
            type=self.input_type,
            value=self.format_value(value),
            placeholder=self.resolve_placeholder(),
        )
        return html.void_tag("input", attributes)


class Password(Text):
    input_type = "password"


class Email(Text):
    input_type = "email"


class Url(Text):
    input_type = "url"


class Telephone(Text):
    input_type = "tel"


class Number(Text):
    input_type = "number"
    supported_rules = ("required", "min", "max", "step")

    def ensure_scalar(self, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str, type(None))):
            raise InvalidInputType(
                f'"{type(self).__name__}" field requires a numeric, string or None value, '
                f"got {type(value).__name__}."
            )
        return value


class Date(Text):
    input_type = "date"
    supported_rules = ("required", "min", "max")

    def ensure_scalar(self, value: Any) -> Any:
        if not isinstance(value, (date, str, type(None))):
            raise InvalidInputType(
                f'"{type(self).__name__}" field requires a date, string or None value, '
                f"got {type(value).__name__}."
            )
        return value

    def format_value(self, value: Any) -> str:
        if isinstance(value, datetime):
            value = value.date()
        if isinstance(value, date):
            return value.isoformat()
        return super().format_value(value)

    def prepare_input_attributes(self, **defaults: Any) -> dict[str, Any]:
        attributes = super().prepare_input_attributes(**defaults)
        for name in ("min", "max"):
            if isinstance(attributes.get(name), date):
                attributes[name] = self.format_value(attributes[name])
        return attributes


class Hidden(InputField):
    """
    A hidden input.

    It never renders a label, hint or error, and has no container unless one
    is requested on the field itself.
    """

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._template = "{input}"
        self._use_container = False

    def generate_label(self) -> str:
        return ""

    def generate_hint(self) -> str:
        return ""

    def generate_error(self) -> str:
        return ""

    def generate_input(self) -> SafeString:
        value = self.ensure_scalar(self.get_value())
        attributes = self.prepare_input_attributes(type="hidden", value=stringify(value))
        return html.void_tag("input", attributes)


class Textarea(PlaceholderField):
    supported_rules = ("required", "minlength", "maxlength")

    def rows(self, value: int):
        return self.add_attributes({"rows": value})

    def cols(self, value: int):
        return self.add_attributes({"cols": value})

    def generate_input(self) -> SafeString:
        value = self.ensure_scalar(self.get_value())
        attributes = self.prepare_input_attributes(placeholder=self.resolve_placeholder())
        attributes.pop("value", None)
        return html.tag("textarea", stringify(value), attributes)


class Select(InputField):
    """
    A drop-down list.

    Items default to the choices of a ``Literal`` or ``Enum`` annotation.
    """

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._items: dict[Any, str] | None = None
        self._prompt: str | None = None
        self._multiple = False

    def items(self, items: Mapping[Any, str]):
        return self._clone(_items=dict(items))

    def prompt(self, text: str | None):
        """Text of a leading option with an empty value."""
        return self._clone(_prompt=text)

    def multiple(self, value: bool = True):
        return self._clone(_multiple=value)

    def _selected_values(self) -> set[str]:
        value = self.get_value()
        if self._multiple and isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            values = list(value)
        else:
            values = [value]
        return {stringify(self.ensure_scalar(item)) for item in values if item is not None}

    def generate_input(self) -> SafeString:
        selected = self._selected_values()
        items = self._items if self._items is not None else helpers.get_choices(self.model, self.attribute)

        options = []
        if self._prompt is not None:
            options.append(html.tag("option", self._prompt, {"value": ""}))
        for value, label in items.items():
            options.append(html.tag("option", label, {"value": stringify(value), "selected": stringify(value) in selected}))

        attributes = self.prepare_input_attributes(multiple=self._multiple)
        if self._multiple:
            attributes["name"] = f"{attributes['name']}[]"
        lines = [html.open_tag("select", attributes), *options, html.close_tag("select")]
        return html.join_lines(lines)


class Checkbox(InputField):
    """
    The input element with a type attribute whose value is "checkbox".

    The "checked" attribute is set when the model value matches the
    checkbox value. A hidden input carrying the uncheck value precedes the
    checkbox so that an unchecked box is still submitted.
    """

    def __init__(self, model: FormModel, attribute: str) -> None:
        super().__init__(model, attribute)
        self._enclosed_by_label = True
        self._label = ""
        self._label_attributes: dict[str, Any] = {}
        self._uncheck_value: Any = "0"
        self._value: Any = "1"

    def enclosed_by_label(self, value: bool = True):
        """Render the checkbox inside its label instead of in the {label} part."""
        return self._clone(_enclosed_by_label=value)

    def label(self, value: str):
        """Text of the enclosing label. Defaults to the attribute label."""
        return self._clone(_label=value)

    def label_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(_label_attributes=dict(attributes))

    def uncheck_value(self, value: Any):
        """Value submitted when unchecked; ``None`` drops the hidden input."""
        return self._clone(_uncheck_value=int(value) if isinstance(value, bool) else value)

    def value(self, value: Any):
        """Value submitted when checked."""
        return self.add_attributes({"value": value})

    def generate_label(self) -> str:
        if self._enclosed_by_label:
            return ""
        return super().generate_label()

    def generate_input(self) -> SafeString:
        value = self.get_value()
        if not is_scalar(value):
            raise InvalidInputType("Checkbox field value can not be an iterable or an object.")

        checked_value = self._attributes.get("value", self._value)
        if isinstance(checked_value, bool):
            checked_value = int(checked_value)

        attributes = self.prepare_input_attributes(type="checkbox")
        attributes["value"] = checked_value
        attributes["checked"] = stringify(value) == stringify(checked_value)
        checkbox = html.void_tag("input", attributes)

        if self._enclosed_by_label:
            label = self._label or helpers.get_label(self.model, self.attribute)
            checkbox = format_html(
                "{}{} {}{}",
                html.open_tag("label", self._label_attributes),
                checkbox,
                label,
                html.close_tag("label"),
            )

        if self._uncheck_value is None:
            return checkbox
        hidden = html.void_tag(
            "input",
            {"type": "hidden", "name": attributes["name"], "value": self._uncheck_value},
        )
        return format_html("{}{}", hidden, checkbox)


# Containers without an input


class Fieldset(BaseField):
    """
    A ``<fieldset>`` around arbitrary content.

    Render it whole with ``content()`` + ``render()``, or stream it::

        fieldset.begin() + inner_html + fieldset.end()
    """

    def __init__(self) -> None:
        super().__init__()
        self._legend: str | None = None
        self._legend_attributes: dict[str, Any] = {}
        self._content: tuple[str, ...] = ()
        self._template_begin = "{input}"
        self._template_end = "{input}"

    def legend(self, value: str | None):
        return self._clone(_legend=value)

    def legend_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(_legend_attributes=dict(attributes))

    def content(self, *items: Any):
        return self._clone(_content=tuple(items))

    def template_begin(self, value: str):
        return self._clone(_template_begin=value)

    def template_end(self, value: str):
        return self._clone(_template_end=value)

    def generate_begin_input(self) -> SafeString:
        opening = html.open_tag("fieldset", self._attributes)
        if self._legend is None:
            return opening
        return format_html("{}\n{}", opening, html.tag("legend", self._legend, self._legend_attributes))

    def generate_end_input(self) -> SafeString:
        return html.close_tag("fieldset")

    def generate_content(self) -> SafeString:
        lines = [render_template(self._template_begin, {"{input}": self.generate_begin_input()})]
        lines.extend(self._content)
        lines.append(render_template(self._template_end, {"{input}": self.generate_end_input()}))
        return html.join_lines(lines)

    def begin(self) -> SafeString:
        content = render_template(self._template_begin, {"{input}": self.generate_begin_input()})
        return mark_safe(f"{self.render_container_begin()}{content}")

    def end(self) -> SafeString:
        content = render_template(self._template_end, {"{input}": self.generate_end_input()})
        return mark_safe(f"{content}{self.render_container_end()}")


class ErrorSummary(BaseField):
    """
    A list of the form's validation errors.

    Renders nothing when there are no errors to show.
    """

    def __init__(self, model: FormModel) -> None:
        super().__init__()
        self.model = model
        self._header = "Please fix the following errors:"
        self._header_attributes: dict[str, Any] = {}
        self._footer = ""
        self._footer_attributes: dict[str, Any] = {}
        self._only_attributes: tuple[str, ...] = ()
        self._show_all_errors = False

    def header(self, value: str):
        return self._clone(_header=value)

    def header_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(_header_attributes=dict(attributes))

    def footer(self, value: str):
        return self._clone(_footer=value)

    def footer_attributes(self, attributes: Mapping[str, Any]):
        return self._clone(_footer_attributes=dict(attributes))

    def only_attributes(self, *attributes: str):
        """Only show errors of these attributes."""
        return self._clone(_only_attributes=tuple(attributes))

    def show_all_errors(self, value: bool = True):
        """Show every error of an attribute instead of the first one."""
        return self._clone(_show_all_errors=value)

    def generate_content(self) -> SafeString:
        errors = self.model.get_error_summary(self._only_attributes or None, self._show_all_errors)
        # Same message reported for several attributes is shown once
        errors = list(dict.fromkeys(errors))
        if not errors:
            return SafeString("")

        items = html.join_lines(html.tag("li", error) for error in errors)
        lines = []
        if self._header:
            lines.append(html.tag("p", self._header, self._header_attributes))
        lines.append(format_html("{}\n{}\n{}", html.open_tag("ul", self._attributes), items, html.close_tag("ul")))
        if self._footer:
            lines.append(html.tag("p", self._footer, self._footer_attributes))
        return html.join_lines(lines)
