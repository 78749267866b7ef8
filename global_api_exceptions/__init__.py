"""
Global exception-to-HTTP-response translation for FastAPI applications.
"""

from .core.definitions import ExceptionDefinition, ExceptionRuleSet
from .core.exceptions import (
    GlobalApiExceptionError,
    InvalidDefinitionError,
    ArgumentNullError,
    ArgumentInheritanceError,
)
from .core.middleware import ExceptionTranslationMiddleware, install_exception_translator
from .core.translator import ExceptionContext, GlobalExceptionTranslator, TranslationOutcome
from .schemas import HttpError

__all__ = [
    "ExceptionDefinition",
    "ExceptionRuleSet",
    "GlobalApiExceptionError",
    "InvalidDefinitionError",
    "ArgumentNullError",
    "ArgumentInheritanceError",
    "ExceptionTranslationMiddleware",
    "install_exception_translator",
    "ExceptionContext",
    "GlobalExceptionTranslator",
    "TranslationOutcome",
    "HttpError",
]
