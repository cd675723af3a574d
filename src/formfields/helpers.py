"""
Accessors that resolve form model data for a single attribute.

Widgets never talk to the model directly; they go through these functions.
Attribute expressions may carry tabular prefixes and suffixes, e.g.
``[0]name`` or ``tags[]``; only the bare name is used to look up values,
labels and errors, while the full expression shapes the input name.
"""

from __future__ import annotations

import re
import types
from enum import Enum
from typing import Any, Literal, Union, get_args, get_origin

from annotated_types import Ge, Gt, Le, Lt, MaxLen, MinLen, MultipleOf

from .models import FormModel
from .types import is_not_blank_marker

ATTRIBUTE_PATTERN = re.compile(r"^(?P<prefix>(?:\[[\w.-]+\])*)(?P<name>\w+)(?P<suffix>(?:\[[\w.-]*\])*)$")


def parse_attribute(attribute: str) -> tuple[str, str, str]:
    """Split ``[0]name[key]`` into ``("[0]", "name", "[key]")``."""
    match = ATTRIBUTE_PATTERN.match(attribute)
    if match is None:
        raise ValueError(f'Attribute name must contain word characters only, got "{attribute}".')
    return match.group("prefix"), match.group("name"), match.group("suffix")


def get_attribute_name(attribute: str) -> str:
    return parse_attribute(attribute)[1]


def get_value(model: FormModel, attribute: str) -> Any:
    return model.get_attribute_value(get_attribute_name(attribute))


def get_label(model: FormModel, attribute: str) -> str:
    return model.get_attribute_label(get_attribute_name(attribute))


def get_hint(model: FormModel, attribute: str) -> str:
    return model.get_attribute_hint(get_attribute_name(attribute))


def get_placeholder(model: FormModel, attribute: str) -> str:
    return model.get_attribute_placeholder(get_attribute_name(attribute))


def get_errors(model: FormModel, attribute: str) -> list[str]:
    return model.get_attribute_errors(get_attribute_name(attribute))


def get_first_error(model: FormModel, attribute: str) -> str:
    return model.get_first_error(get_attribute_name(attribute))


def has_errors(model: FormModel, attribute: str) -> bool:
    return model.has_errors(get_attribute_name(attribute))


def get_input_name(model: FormModel, attribute: str) -> str:
    """
    Build the name of the input for an attribute.

    ``TextForm`` + ``name`` gives ``TextForm[name]``; an empty form name
    gives the attribute expression unchanged.
    """
    prefix, name, suffix = parse_attribute(attribute)
    form_name = model.get_form_name()
    if not form_name:
        return attribute
    return f"{form_name}{prefix}[{name}]{suffix}"


def get_input_id(model: FormModel, attribute: str) -> str:
    """Derive the input id from the input name (``TextForm[name]`` -> ``textform-name``)."""
    name = get_input_name(model, attribute).lower()
    for search, replace in (("[]", ""), ("][", "-"), ("[", "-"), ("]", ""), (" ", "-"), (".", "-")):
        name = name.replace(search, replace)
    return name


def get_rules(model: FormModel, attribute: str) -> dict[str, Any]:
    """
    Collect HTML validation attributes implied by the schema's constraints.

    Possible keys: ``required``, ``minlength``, ``maxlength``, ``pattern``,
    ``min``, ``max``, ``step``.
    """
    field_info = model.get_field_info(get_attribute_name(attribute))
    rules: dict[str, Any] = {}

    if field_info.is_required():
        rules["required"] = True

    for meta in field_info.metadata:
        if is_not_blank_marker(meta):
            rules["required"] = True

        # String length constraints
        if isinstance(meta, MinLen):
            rules["minlength"] = meta.min_length
        if isinstance(meta, MaxLen):
            rules["maxlength"] = meta.max_length

        # Numeric constraints (HTML has no exclusive bounds)
        if isinstance(meta, Ge):
            rules["min"] = meta.ge
        if isinstance(meta, Gt):
            rules["min"] = meta.gt
        if isinstance(meta, Le):
            rules["max"] = meta.le
        if isinstance(meta, Lt):
            rules["max"] = meta.lt
        if isinstance(meta, MultipleOf):
            rules["step"] = meta.multiple_of

        pattern = getattr(meta, "pattern", None)
        if isinstance(pattern, str):
            rules["pattern"] = pattern

    return rules


def get_choices(model: FormModel, attribute: str) -> dict[Any, str]:
    """
    Detect choices from a Literal or Enum annotation.

    Returns a mapping of value to label, empty when the attribute has none.
    """
    annotation = model.get_field_info(get_attribute_name(attribute)).annotation
    annotation = _unwrap_optional(annotation)

    # Literal["a", "b", "c"]
    if get_origin(annotation) is Literal:
        return {value: str(value) for value in get_args(annotation)}

    # Enum subclass
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return {member.value: member.name.replace("_", " ").title() for member in annotation}

    return {}


def _unwrap_optional(annotation: Any) -> Any:
    """If annotation is Optional[X] or X | None, return X."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return annotation
