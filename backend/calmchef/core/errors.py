"""Exceptions raised by the cooking assistant."""


class CalmChefError(Exception):
    """Base exception for cooking assistant errors."""

    pass


class BudgetExceededError(CalmChefError):
    """Raised when input is too large for the token budget."""

    pass


class ChefServiceError(CalmChefError):
    """Raised when the hosted model cannot be reached or fails."""

    pass


class QuotaExceededError(ChefServiceError):
    """Raised when the hosted model reports a billing or rate quota error."""

    pass


class MalformedRecipeError(ChefServiceError):
    """Raised when the model returns something that is not a recipe."""

    pass


class UnknownStepError(CalmChefError):
    """Raised when a timer refers to a step the recipe does not have."""

    pass


class StorageKeyError(CalmChefError):
    """Raised for keys the chef store does not know about."""

    pass
