"""
Validated configuration for FieldFactory.

Options mirror the with-methods of the fields they configure. Only options
that were explicitly given are applied, so ``label_class=None`` (remove the
class) is different from leaving ``label_class`` out. ``None`` is accepted
only where it means something: the ``*_class`` options, ``container_tag``
(no container), ``valid_class`` and ``invalid_class``.

Example Django setting::

    FORMFIELDS = {
        "container_class": "mb-3",
        "input_class": "form-control",
        "invalid_class": "has-error",
        "field_configs": {
            "formfields.fields.Checkbox": {"container_class": "form-check"},
            "formfields.fields.Text": {"container_class": [["field", "text"]]},
        },
    }

In override sequences (``field_configs``, ``label_config``, ...) a list
value is the argument list of the call. A single list argument, such as a
class list, must therefore be nested: ``{"container_class": [["a", "b"]]}``.
"""

from __future__ import annotations

from typing import Any

from django.utils.module_loading import import_string
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidConfiguration
from .fields import DEFAULT_TEMPLATE
from .parts import Error, Hint, Label
from .widget import Override, Widget, check_overrides

ClassOption = str | list[str] | None

PART_CLASSES = {"label_config": Label, "hint_config": Hint, "error_config": Error}


class FieldFactoryConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    # Templates
    template: str = DEFAULT_TEMPLATE
    template_begin: str = "{input}"
    template_end: str = "{input}"

    # Container
    container_tag: str | None = None
    container_attributes: dict[str, Any] = {}
    container_class: ClassOption = None
    use_container: bool = True

    # Input
    input_attributes: dict[str, Any] = {}
    input_class: ClassOption = None
    set_input_id: bool = True
    use_placeholder: bool = True
    enrichment_from_rules: bool = False
    valid_class: str | None = None
    invalid_class: str | None = None

    # Parts
    label_class: ClassOption = None
    hint_class: ClassOption = None
    error_class: ClassOption = None
    label_config: list[Override] = []
    hint_config: list[Override] = []
    error_config: list[Override] = []

    # Per widget class override sequences
    field_configs: dict[type[Widget], list[Override]] = {}

    @field_validator("container_tag")
    @classmethod
    def _check_container_tag(cls, value: str | None) -> str | None:
        if value == "":
            raise ValueError("Tag name cannot be empty.")
        return value

    @field_validator("label_config", "hint_config", "error_config", mode="before")
    @classmethod
    def _check_part_overrides(cls, value: Any, info: ValidationInfo) -> list[Override]:
        return check_overrides(PART_CLASSES[info.field_name], value)

    @field_validator("field_configs", mode="before")
    @classmethod
    def _check_field_configs(cls, value: Any) -> dict[Any, list[Override]]:
        if value is None:
            return {}
        configs = {}
        for key, overrides in dict(value).items():
            try:
                widget_class = import_string(key) if isinstance(key, str) else key
            except ImportError as e:
                raise ValueError(str(e)) from e
            if not (isinstance(widget_class, type) and issubclass(widget_class, Widget)):
                raise ValueError(f"{key!r} is not a widget class.")
            configs[widget_class] = check_overrides(widget_class, overrides)
        return configs

    def is_set(self, option: str) -> bool:
        return option in self.model_fields_set

    @classmethod
    def create(cls, options: dict[str, Any]) -> FieldFactoryConfig:
        """Validate raw options, raising InvalidConfiguration on failure."""
        try:
            return cls(**options)
        except PydanticValidationError as e:
            messages = []
            for err in e.errors():
                option = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
                if err.get("type") == "extra_forbidden":
                    messages.append(f'Unknown option "{option}".')
                else:
                    messages.append(f'Invalid option "{option}": {err.get("msg")}')
            raise InvalidConfiguration(" ".join(messages)) from e
