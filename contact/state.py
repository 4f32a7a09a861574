"""Form state for the contact form.

The three text fields are held in an immutable ``FormState``. Every user
action is a message (``FieldChange`` or ``Submit``) handled synchronously by
``reduce``, which returns the next state.
"""
import logging
from dataclasses import dataclass, fields, replace

logger = logging.getLogger("django_form_practice")

FIELD_NAMES = ("name", "email", "message")


class UnknownFieldError(ValueError):
    pass


class InvalidFieldValueError(ValueError):
    pass


@dataclass(frozen=True)
class FormState:
    name: str = ""
    email: str = ""
    message: str = ""

    def as_dict(self):
        return {field.name: getattr(self, field.name) for field in fields(self)}


@dataclass(frozen=True)
class FieldChange:
    field_name: str
    value: str


@dataclass(frozen=True)
class Submit:
    pass


def log_form_data(data):
    logger.info("Form Data: %s", data)


def change_field(state, field_name, value):
    """Return a copy of ``state`` with only ``field_name`` set to ``value``."""
    if field_name not in FIELD_NAMES:
        raise UnknownFieldError(f"Unknown field: {field_name!r}")
    if not isinstance(value, str):
        raise InvalidFieldValueError(
            f"Value for {field_name!r} must be a string, got {type(value).__name__}"
        )
    return replace(state, **{field_name: value})


def submit(state, sink=None):
    sink = sink or log_form_data
    sink(state.as_dict())


def reduce(state, message, sink=None):
    if isinstance(message, FieldChange):
        return change_field(state, message.field_name, message.value)
    if isinstance(message, Submit):
        submit(state, sink)
        return state
    raise TypeError(f"Unsupported message: {message!r}")


def state_from_fields(data):
    # keys outside FIELD_NAMES are ignored, missing ones stay empty
    state = FormState()
    for field_name in FIELD_NAMES:
        if field_name in data:
            state = reduce(state, FieldChange(field_name, data[field_name]))
    return state


class FormController:
    """Owns the live form state and feeds it each message in turn."""

    def __init__(self, sink=None):
        self.sink = sink
        self.state = FormState()

    def dispatch(self, message):
        self.state = reduce(self.state, message, self.sink)
        return self.state

    def change(self, field_name, value):
        return self.dispatch(FieldChange(field_name, value))

    def submit(self):
        self.dispatch(Submit())
