"""
Exception definitions and the ordered rule set consulted by the translator
"""
from typing import Callable, Iterable, Iterator, Optional, Union
from fastapi import status

from global_api_exceptions.core.exceptions import (
    InvalidDefinitionError,
    assert_inherits_from,
    assert_not_null,
)

MessageFormatter = Callable[[Exception], str]
HandlePredicate = Callable[[Exception], bool]


def exception_message(exc: Exception) -> str:
    """
    The exception's own message as shown to API clients.

    A ``KeyError`` reports its key unquoted; an exception without a message
    gets a generic one naming its type.
    """
    if isinstance(exc, KeyError) and len(exc.args) == 1:
        message = str(exc.args[0])
    else:
        message = str(exc)
    return message or f"Exception of type '{type(exc).__name__}' was thrown."


def _normalize_message(friendly_message: Union[str, MessageFormatter, None]) -> MessageFormatter:
    if friendly_message is None:
        return exception_message
    if isinstance(friendly_message, str):
        return lambda exc: friendly_message
    if callable(friendly_message):
        return friendly_message
    raise InvalidDefinitionError(
        "Argument 'friendly_message' must be a string or a callable.", "friendly_message"
    )


class ExceptionDefinition:
    """
    Maps one exact exception type to a friendly message and HTTP status.

    ``exception_type`` and ``friendly_message`` are fixed at construction.
    ``handle``, ``status_code``, ``error_code`` and ``error_reference`` stay
    assignable so definitions can be configured fluently at startup:

        ExceptionDefinition(NotFoundError, "Resource missing").with_status(404)

    Only instances whose runtime type *is* ``exception_type`` match;
    subclasses need a definition of their own.
    """

    def __init__(
        self,
        exception_type: type,
        friendly_message: Union[str, MessageFormatter, None] = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        handle: Optional[HandlePredicate] = None,
        error_code: Optional[str] = None,
        error_reference: Optional[str] = None,
    ):
        formatter = _normalize_message(friendly_message)

        assert_not_null(formatter, "friendly_message")
        assert_not_null(exception_type, "exception_type")
        assert_inherits_from(exception_type, Exception, "exception_type")

        self._exception_type = exception_type
        self._friendly_message = formatter
        self.handle = handle
        self.status_code = int(status_code)
        self.error_code = error_code
        self.error_reference = error_reference

    @classmethod
    def from_formatter(
        cls,
        exception_type: type,
        formatter: Optional[MessageFormatter],
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        **kwargs,
    ) -> "ExceptionDefinition":
        """Build a definition whose message is computed from the exception"""
        assert_not_null(formatter, "friendly_message")
        if not callable(formatter):
            raise InvalidDefinitionError("Argument 'friendly_message' must be callable.", "friendly_message")
        return cls(exception_type, formatter, status_code, **kwargs)

    @property
    def exception_type(self) -> type:
        return self._exception_type

    @property
    def friendly_message(self) -> MessageFormatter:
        return self._friendly_message

    # Fluent configuration

    def when(self, predicate: Optional[HandlePredicate]) -> "ExceptionDefinition":
        self.handle = predicate
        return self

    def with_status(self, status_code: int) -> "ExceptionDefinition":
        self.status_code = int(status_code)
        return self

    def with_error_code(self, error_code: Optional[str]) -> "ExceptionDefinition":
        self.error_code = error_code
        return self

    def with_error_reference(self, error_reference: Optional[str]) -> "ExceptionDefinition":
        self.error_reference = error_reference
        return self

    # Matching

    def matches(self, exc: Exception) -> bool:
        """Exact type check, then the optional predicate"""
        if type(exc) is not self._exception_type:
            return False
        return self.handle is None or bool(self.handle(exc))

    def message_for(self, exc: Exception) -> str:
        """Formatter result as text; None falls back to the exception's own message"""
        message = self._friendly_message(exc)
        if message is None:
            return exception_message(exc)
        return message if isinstance(message, str) else str(message)

    def __repr__(self) -> str:
        return (
            f"ExceptionDefinition({self._exception_type.__name__}, "
            f"status_code={self.status_code}, error_code={self.error_code!r}, "
            f"error_reference={self.error_reference!r}, "
            f"guarded={self.handle is not None})"
        )


class ExceptionRuleSet:
    """Ordered, fixed collection of definitions; first match wins"""

    def __init__(self, definitions: Optional[Iterable[ExceptionDefinition]] = None):
        definitions = tuple(definitions or ())
        for index, definition in enumerate(definitions):
            if not isinstance(definition, ExceptionDefinition):
                raise InvalidDefinitionError(
                    f"Rule at position {index} is not an ExceptionDefinition: {definition!r}",
                    "definitions",
                )
        self._definitions = definitions

    def find_match(self, exc: Exception) -> Optional[ExceptionDefinition]:
        for definition in self._definitions:
            if definition.matches(exc):
                return definition
        return None

    def __iter__(self) -> Iterator[ExceptionDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def __bool__(self) -> bool:
        return bool(self._definitions)

    def __repr__(self) -> str:
        return f"ExceptionRuleSet({list(self._definitions)!r})"
