from importlib.metadata import PackageNotFoundError, version

from .exceptions import FormFieldError, InvalidConfiguration, InvalidInputType, InvalidWidgetType
from .factory import FieldFactory
from .fields import (
    Checkbox,
    Date,
    Email,
    ErrorSummary,
    Fieldset,
    Hidden,
    InputField,
    Number,
    Password,
    Select,
    Telephone,
    Text,
    Textarea,
    Url,
)
from .models import FormModel
from .parts import Error, Hint, Label
from .types import NotBlank

try:
    __version__ = version("django-formfields")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "FieldFactory",
    "FormModel",
    "NotBlank",
    "InputField",
    "Checkbox",
    "Date",
    "Email",
    "Hidden",
    "Number",
    "Password",
    "Select",
    "Telephone",
    "Text",
    "Textarea",
    "Url",
    "Label",
    "Hint",
    "Error",
    "ErrorSummary",
    "Fieldset",
    "FormFieldError",
    "InvalidConfiguration",
    "InvalidInputType",
    "InvalidWidgetType",
    "__version__",
]
