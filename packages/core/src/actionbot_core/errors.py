"""Exceptions raised by actionbot_core.

Operation failures never surface as exceptions — the command wrapper records
them in the error log instead. These types cover configuration problems and
misuse of the context lifecycle.
"""


class ActionbotError(Exception):
    """Base class for all actionbot errors."""


class ConfigurationError(ActionbotError):
    """A value needed to reach GitHub (repository, issue number) is missing or malformed."""


class ContextStateError(ActionbotError):
    """The context was used out of order, e.g. finalized twice."""
