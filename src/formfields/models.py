"""
Form models backed by Pydantic schemas.

A FormModel holds the raw values submitted for a form together with the
validation errors produced for them. Pydantic is the single source of truth
for rules: labels, hints, placeholders and constraints are all read from the
schema's ``model_fields``.

Usage:
    from pydantic import BaseModel, Field
    from formfields import FormModel, NotBlank

    class ContactSchema(BaseModel):
        name: NotBlank = Field(default="", description="Input your full name.")
        email: str = ""

    class ContactForm(FormModel):
        class Meta:
            schema = ContactSchema

    form = ContactForm()
    form.load(request.POST)
    if form.validate():
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pydantic.fields import FieldInfo
from pydantic_core import ErrorDetails, PydanticUndefined

logger = logging.getLogger(__name__)


# Pydantic Error Message Translation

ERROR_MESSAGES: dict[str, str] = {
    # Required/blank
    "missing": "Value cannot be blank.",
    "not_blank": "Value cannot be blank.",
    # String errors
    "string_type": "Value must be a string.",
    "string_too_short": "This value should contain at least {min_length} characters.",
    "string_too_long": "This value should contain at most {max_length} characters.",
    "string_pattern_mismatch": "Value is invalid.",
    # Numeric errors
    "int_type": "Value must be an integer.",
    "int_parsing": "Value must be an integer.",
    "float_type": "Value must be a number.",
    "float_parsing": "Value must be a number.",
    "decimal_type": "Value must be a number.",
    "decimal_parsing": "Value must be a number.",
    "greater_than": "Value must be greater than {gt}.",
    "greater_than_equal": "Value must be no less than {ge}.",
    "less_than": "Value must be less than {lt}.",
    "less_than_equal": "Value must be no greater than {le}.",
    # Boolean errors
    "bool_type": "Value must be either true or false.",
    "bool_parsing": "Value must be either true or false.",
    # Date/time errors
    "date_type": "Value must be a valid date.",
    "date_parsing": "Value must be a valid date.",
    "date_from_datetime_parsing": "Value must be a valid date.",
    "datetime_type": "Value must be a valid date and time.",
    "datetime_parsing": "Value must be a valid date and time.",
    # Choice/enum errors
    "literal_error": "Value is not in the list of acceptable values.",
    "enum": "Value is not in the list of acceptable values.",
}


def convert_pydantic_error(error: ErrorDetails) -> tuple[str | None, str]:
    """
    Convert a Pydantic error dict to (attribute, user_friendly_message).

    Error location handling:
    - Single attribute in loc: error attaches to that attribute
    - Empty loc or '__root__': common error (not bound to an attribute)
    - Nested loc: uses first element as attribute name
    """
    loc = error.get("loc", ())
    if loc and loc[0] != "__root__":
        attribute: str | None = str(loc[0])
    else:
        attribute = None

    error_type = error.get("type", "value_error")
    ctx = error.get("ctx", {}) or {}

    # ValueError raised from a validator carries the message we want
    if error_type == "value_error" and "error" in ctx:
        message = str(ctx["error"])
    elif error_type in ERROR_MESSAGES:
        message = ERROR_MESSAGES[error_type]
        try:
            message = message.format(**ctx)
        except KeyError:
            pass
    else:
        message = error.get("msg", "Value is invalid.")

    return attribute, message


class FormModelOptions:
    def __init__(self, schema: type[BaseModel] | None = None, form_name: str | None = None):
        self.schema = schema
        self.form_name = form_name


class FormModelMeta(type):
    def __new__(mcs, name, bases, attrs):
        _meta = attrs.get("Meta", None)
        new_class = super().__new__(mcs, name, bases, attrs)
        if _meta is not None:
            new_class._meta = FormModelOptions(
                schema=getattr(_meta, "schema", None),
                form_name=getattr(_meta, "form_name", None),
            )
        elif not hasattr(new_class, "_meta"):
            new_class._meta = FormModelOptions()
        return new_class


class FormModel(metaclass=FormModelMeta):
    """
    Values, labels, hints and validation errors of one form.

    Subclasses declare the Pydantic schema in ``Meta.schema``. The form name
    used to build input names defaults to the class name and can be changed
    with ``Meta.form_name`` (an empty string gives bare input names).
    """

    _meta: FormModelOptions
    schema: type[BaseModel]

    def __init__(self, data: Mapping[str, Any] | None = None):
        schema = getattr(self._meta, "schema", None)
        if not schema or not (isinstance(schema, type) and issubclass(schema, BaseModel)):
            raise ValueError(
                "Subclasses of FormModel must define a 'schema' attribute "
                "in 'Meta' that is a subclass of pydantic.BaseModel"
            )
        self.schema = schema

        self._values: dict[str, Any] = {
            name: self._default_value(field_info) for name, field_info in schema.model_fields.items()
        }
        self._errors: dict[str, list[str]] = {}
        self._common_errors: list[str] = []
        self._validated = False
        self.cleaned_data: dict[str, Any] | None = None

        if data:
            self._values.update((k, v) for k, v in data.items() if k in self._values)

    def _default_value(self, field_info: FieldInfo) -> Any:
        if field_info.default is not PydanticUndefined:
            return field_info.default
        if field_info.default_factory is not None:
            return field_info.default_factory()  # type: ignore[call-arg]
        return None

    # Attributes

    def get_form_name(self) -> str:
        if self._meta.form_name is not None:
            return self._meta.form_name
        return type(self).__name__

    def has_attribute(self, attribute: str) -> bool:
        return attribute in self.schema.model_fields

    def get_field_info(self, attribute: str) -> FieldInfo:
        try:
            return self.schema.model_fields[attribute]
        except KeyError:
            raise ValueError(f'Undefined attribute "{attribute}" in {type(self).__name__}.') from None

    def get_attribute_value(self, attribute: str) -> Any:
        self.get_field_info(attribute)
        return self._values.get(attribute)

    def set_attribute_value(self, attribute: str, value: Any) -> None:
        self.get_field_info(attribute)
        self._values[attribute] = value

    def get_attribute_label(self, attribute: str) -> str:
        field_info = self.get_field_info(attribute)
        return field_info.title or attribute.replace("_", " ").title()

    def get_attribute_hint(self, attribute: str) -> str:
        return self.get_field_info(attribute).description or ""

    def get_attribute_placeholder(self, attribute: str) -> str:
        extra = self.get_field_info(attribute).json_schema_extra
        if isinstance(extra, dict):
            return str(extra.get("placeholder") or "")
        return ""

    # Loading

    def load(self, data: Mapping[str, Any]) -> bool:
        """
        Populate values from submitted data.

        Accepts either a nested mapping keyed by the form name, or flat
        input names such as ``ContactForm[name]`` (a Django QueryDict from
        ``request.POST``). Returns whether any attribute was loaded.

        A repeated ``Form[attr]`` key keeps its last value, so a checkbox
        submitted together with its hidden uncheck input loads as the
        checkbox value. Lists are read from ``Form[attr][]`` keys, as sent
        by multiple selects.
        """
        form_name = self.get_form_name()
        if form_name and isinstance(data.get(form_name), Mapping):
            data = data[form_name]
            form_name = ""

        loaded = False
        for attribute in self._values:
            key = f"{form_name}[{attribute}]" if form_name else attribute
            if f"{key}[]" in data:
                self._values[attribute] = self._pick_list(data, f"{key}[]")
            elif key in data:
                # QueryDict.__getitem__ returns the last value of a repeated key
                self._values[attribute] = data[key]
            else:
                continue
            loaded = True
        if loaded:
            self._validated = False
        return loaded

    def _pick_list(self, data: Mapping[str, Any], key: str) -> list[Any]:
        getlist = getattr(data, "getlist", None)
        if getlist is not None:
            return getlist(key)
        value = data[key]
        return list(value) if isinstance(value, (list, tuple)) else [value]

    # Validation

    def validate(self) -> bool:
        """Validate current values with the schema and collect errors."""
        self._errors = {}
        self._common_errors = []
        self.cleaned_data = None

        # Unset required attributes are left out so Pydantic reports them as missing
        data = {
            attribute: value
            for attribute, value in self._values.items()
            if value is not None or not self.schema.model_fields[attribute].is_required()
        }

        try:
            validated = self.schema.model_validate(data)
            self.cleaned_data = validated.model_dump()
        except PydanticValidationError as e:
            for err in e.errors():
                attribute, message = convert_pydantic_error(err)
                self.add_error(attribute, message)

        self._validated = True
        logger.debug(
            "Validated %s: %d attribute(s) with errors",
            type(self).__name__,
            len(self._errors),
        )
        return not self.has_errors()

    @property
    def is_validated(self) -> bool:
        return self._validated

    def add_error(self, attribute: str | None, message: str) -> None:
        if attribute is None:
            self._common_errors.append(message)
        else:
            self._errors.setdefault(attribute, []).append(message)

    def get_errors(self) -> dict[str, list[str]]:
        return {attribute: list(messages) for attribute, messages in self._errors.items()}

    def get_common_errors(self) -> list[str]:
        return list(self._common_errors)

    def get_attribute_errors(self, attribute: str) -> list[str]:
        return list(self._errors.get(attribute, []))

    def get_first_error(self, attribute: str) -> str:
        errors = self._errors.get(attribute)
        return errors[0] if errors else ""

    def has_errors(self, attribute: str | None = None) -> bool:
        if attribute is None:
            return bool(self._errors or self._common_errors)
        return bool(self._errors.get(attribute))

    def get_error_summary(
        self,
        only_attributes: Iterable[str] | None = None,
        show_all: bool = False,
    ) -> list[str]:
        """
        Flatten errors into a list of messages.

        Common errors come first. With ``only_attributes`` only the listed
        attributes are included (and common errors are skipped). Unless
        ``show_all`` is set only the first error of each attribute is kept.
        """
        allowed = set(only_attributes) if only_attributes else None
        summary = [] if allowed is not None else list(self._common_errors)
        for attribute, messages in self._errors.items():
            if allowed is not None and attribute not in allowed:
                continue
            summary.extend(messages if show_all else messages[:1])
        return summary
