"""
Exceptions raised by the normalization and insights engine and its collaborators.
"""


class SmartSpendError(Exception):
    """Base class for SmartSpend errors."""


class InvalidRecordShape(SmartSpendError):
    """A raw transaction record was not a mapping."""


class InvalidInputShape(SmartSpendError):
    """A transaction batch was not a sequence of the expected items."""


class PlaidNotConfigured(SmartSpendError):
    """Plaid credentials are missing from the environment."""


class AssistantError(SmartSpendError):
    """The chat completion call failed for every configured model."""
