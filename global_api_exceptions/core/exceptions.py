"""
Configuration errors raised while declaring exception definitions
"""
from typing import Optional, Dict, Any

ARGUMENT_NULL_FMT = "Argument '{0}' cannot be null."
ARGUMENT_MUST_INHERIT_FROM_FMT = "Type must inherit from {0}."


class GlobalApiExceptionError(Exception):
    """Base exception for errors raised by this package"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidDefinitionError(GlobalApiExceptionError, ValueError):
    """Raised when an exception definition is misconfigured"""
    def __init__(self, message: str, param_name: Optional[str] = None):
        self.param_name = param_name
        super().__init__(message, {"param_name": param_name})


class ArgumentNullError(InvalidDefinitionError):
    """Raised when a required argument is None"""
    pass


class ArgumentInheritanceError(InvalidDefinitionError, TypeError):
    """Raised when a type argument does not derive from the required base"""
    pass


def assert_not_null(value: Any, name: str) -> None:
    """Fail fast when a required argument is missing"""
    if value is None:
        raise ArgumentNullError(ARGUMENT_NULL_FMT.format(name), name)


def assert_inherits_from(value: Any, base: type, name: str) -> None:
    """
    Require ``value`` to be a strict subclass of ``base``.

    ``base`` itself is rejected, as is anything that is not a class.
    """
    if not isinstance(value, type) or value is base or not issubclass(value, base):
        raise ArgumentInheritanceError(ARGUMENT_MUST_INHERIT_FROM_FMT.format(base.__name__), name)
