"""
FieldFactory: builds fields pre-configured with shared defaults.

Configuration is applied in three layers, each one a sequence of with-method
calls replayed in order, so later layers win:

1. factory-wide options (``template``, ``container_class``, ...), applied
   only to widgets that support them;
2. the override sequence registered for the widget class in
   ``field_configs``;
3. the overrides passed by the caller.

Usage:
    factory = FieldFactory(
        container_class="mb-3",
        input_class="form-control",
        field_configs={Checkbox: [("container_class", ["form-check"])]},
    )
    html = factory.text(form, "name").render()
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from .config import FieldFactoryConfig
from .exceptions import InvalidConfiguration, InvalidWidgetType
from .fields import (
    BaseField,
    Checkbox,
    Date,
    Email,
    ErrorSummary,
    Fieldset,
    Hidden,
    InputField,
    Number,
    PartsField,
    Password,
    PlaceholderField,
    Select,
    Telephone,
    Text,
    Textarea,
    Url,
)
from .models import FormModel
from .parts import Error, Hint, Label
from .widget import Override, Widget, apply_overrides

logger = logging.getLogger(__name__)

W = TypeVar("W", bound=Widget)
F = TypeVar("F", bound=InputField)

CONTAINER_OPTIONS = ("container_tag", "container_attributes", "container_class", "use_container")
INPUT_OPTIONS = (
    "input_attributes",
    "input_class",
    "set_input_id",
    "enrichment_from_rules",
    "valid_class",
    "invalid_class",
)


class FieldFactory:
    def __init__(self, config: FieldFactoryConfig | None = None, **options: Any) -> None:
        if config is not None and options:
            raise InvalidConfiguration("Pass either a FieldFactoryConfig or keyword options, not both.")
        self.config = config if config is not None else FieldFactoryConfig.create(options)

    @classmethod
    def from_settings(cls, setting_name: str = "FORMFIELDS") -> FieldFactory:
        """Build a factory from a Django setting holding the options mapping."""
        from django.conf import settings

        return cls(**getattr(settings, setting_name, {}))

    # Building

    def field(self, field_class: type[W], *args: Any, overrides: Any = ()) -> W:
        """Instantiate any widget with ``args`` and apply the configuration layers."""
        if not (isinstance(field_class, type) and issubclass(field_class, Widget)):
            raise InvalidWidgetType(f'Widget must be a subclass of "{Widget.__module__}.{Widget.__qualname__}".')

        widget = field_class(*args)
        widget = apply_overrides(widget, self._base_overrides(field_class))
        widget = apply_overrides(widget, self.config.field_configs.get(field_class, ()))
        widget = apply_overrides(widget, overrides)
        logger.debug("Built %s", field_class.__name__)
        return widget

    def make_field(self, field_class: type[F], model: FormModel, attribute: str, overrides: Any = ()) -> F:
        """Build an input field bound to ``model.attribute``."""
        if not (isinstance(field_class, type) and issubclass(field_class, InputField)):
            raise InvalidWidgetType(
                f'Input widget must be a subclass of "{InputField.__module__}.{InputField.__qualname__}".'
            )
        return self.field(field_class, model, attribute, overrides=overrides)

    def _base_overrides(self, field_class: type[Widget]) -> list[Override]:
        config = self.config
        overrides: list[Override] = []

        def add(*options: str) -> None:
            for option in options:
                if config.is_set(option):
                    overrides.append((option, (getattr(config, option),)))

        # Hidden inputs keep their bare layout; field_configs can still change it
        if issubclass(field_class, Hidden):
            add(*INPUT_OPTIONS)
            return overrides

        if issubclass(field_class, BaseField):
            add(*CONTAINER_OPTIONS)
        if issubclass(field_class, PartsField):
            add("template")
            for part in ("label", "hint", "error"):
                part_overrides = self._part_overrides(part)
                if part_overrides:
                    overrides.append((f"{part}_config", (part_overrides,)))
        if issubclass(field_class, Fieldset):
            add("template_begin", "template_end")
        if issubclass(field_class, InputField):
            add(*INPUT_OPTIONS)
        if issubclass(field_class, PlaceholderField):
            add("use_placeholder")

        for part, part_class in (("label", Label), ("hint", Hint), ("error", Error)):
            if issubclass(field_class, part_class):
                overrides.extend(self._part_overrides(part))

        return overrides

    def _part_overrides(self, part: str) -> list[Override]:
        overrides: list[Override] = []
        if self.config.is_set(f"{part}_class"):
            overrides.append(("replace_class", (getattr(self.config, f"{part}_class"),)))
        overrides.extend(getattr(self.config, f"{part}_config"))
        return overrides

    # Shortcuts

    def text(self, model: FormModel, attribute: str, overrides: Any = ()) -> Text:
        return self.make_field(Text, model, attribute, overrides)

    def password(self, model: FormModel, attribute: str, overrides: Any = ()) -> Password:
        return self.make_field(Password, model, attribute, overrides)

    def email(self, model: FormModel, attribute: str, overrides: Any = ()) -> Email:
        return self.make_field(Email, model, attribute, overrides)

    def url(self, model: FormModel, attribute: str, overrides: Any = ()) -> Url:
        return self.make_field(Url, model, attribute, overrides)

    def telephone(self, model: FormModel, attribute: str, overrides: Any = ()) -> Telephone:
        return self.make_field(Telephone, model, attribute, overrides)

    def number(self, model: FormModel, attribute: str, overrides: Any = ()) -> Number:
        return self.make_field(Number, model, attribute, overrides)

    def date(self, model: FormModel, attribute: str, overrides: Any = ()) -> Date:
        return self.make_field(Date, model, attribute, overrides)

    def textarea(self, model: FormModel, attribute: str, overrides: Any = ()) -> Textarea:
        return self.make_field(Textarea, model, attribute, overrides)

    def select(self, model: FormModel, attribute: str, overrides: Any = ()) -> Select:
        return self.make_field(Select, model, attribute, overrides)

    def hidden(self, model: FormModel, attribute: str, overrides: Any = ()) -> Hidden:
        return self.make_field(Hidden, model, attribute, overrides)

    def checkbox(self, model: FormModel, attribute: str, overrides: Any = ()) -> Checkbox:
        return self.make_field(Checkbox, model, attribute, overrides)

    def label(self, model: FormModel, attribute: str, overrides: Any = ()) -> Label:
        return self.field(Label, model, attribute, overrides=overrides)

    def hint(self, model: FormModel, attribute: str, overrides: Any = ()) -> Hint:
        return self.field(Hint, model, attribute, overrides=overrides)

    def error(self, model: FormModel, attribute: str, overrides: Any = ()) -> Error:
        return self.field(Error, model, attribute, overrides=overrides)

    def error_summary(self, model: FormModel, overrides: Any = ()) -> ErrorSummary:
        return self.field(ErrorSummary, model, overrides=overrides)

    def fieldset(self, overrides: Any = ()) -> Fieldset:
        return self.field(Fieldset, overrides=overrides)
