"""Exceptions raised while configuring or rendering fields."""


class FormFieldError(Exception):
    """Base class for all errors raised by formfields."""


class InvalidInputType(FormFieldError, TypeError):
    """The model value cannot be represented by the widget."""


class InvalidWidgetType(FormFieldError, TypeError):
    """The requested widget class lacks a required capability."""


class InvalidConfiguration(FormFieldError, ValueError):
    """An unknown option or configuration method was supplied."""
