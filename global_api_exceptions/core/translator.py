"""
Global exception translator: turns unhandled exceptions into friendly HTTP errors
"""
from typing import Callable, Iterable, List, Optional, Tuple, Union
from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from starlette.exceptions import HTTPException as StarletteHTTPException
import inspect
import functools
import logging

from global_api_exceptions.core.definitions import ExceptionDefinition, ExceptionRuleSet, exception_message
from global_api_exceptions.schemas import HttpError

logger = logging.getLogger(__name__)

# Set on exceptions a translator has finalized but left to propagate
FINALIZED_BY_ATTR = "__global_api_exceptions_finalized_by__"


class TranslationOutcome(BaseModel):
    """Status code and payload chosen for a translated exception"""
    status_code: int
    payload: HttpError
    model_config = ConfigDict(frozen=True)

    @property
    def content(self) -> dict:
        return self.payload.to_content()

    def to_response(self) -> JSONResponse:
        return JSONResponse(status_code=self.status_code, content=self.content)


class ExceptionContext:
    """State handed to the post-processing step of a single exception"""

    def __init__(
        self,
        exception: Exception,
        request: Optional[Request] = None,
        definition: Optional[ExceptionDefinition] = None,
        outcome: Optional[TranslationOutcome] = None,
    ):
        self.exception = exception
        self.request = request
        self.definition = definition
        self.outcome = outcome
        self.response: Optional[JSONResponse] = outcome.to_response() if outcome is not None else None

    @property
    def handled(self) -> bool:
        return self.response is not None


Finalizer = Callable[[ExceptionContext], None]


class GlobalExceptionTranslator:
    """
    Looks up the first matching definition for an exception and builds the
    structured error response for it.

    Each exception goes through two steps: ``translate`` (which may or may
    not produce a response) and ``finalize``, which always runs. Without a
    match the exception is left to propagate unless
    ``catch_unfiltered_exceptions`` is set, in which case it becomes a 500
    carrying the exception's own message.

    Callbacks on definitions (message formatters, ``handle`` predicates)
    run unguarded; anything they raise propagates to the caller.
    """

    def __init__(
        self,
        definitions: Union[ExceptionRuleSet, Iterable[ExceptionDefinition], None] = None,
        catch_unfiltered_exceptions: bool = False,
        finalizers: Optional[Iterable[Finalizer]] = None,
    ):
        if isinstance(definitions, ExceptionRuleSet):
            self.rules = definitions
        else:
            self.rules = ExceptionRuleSet(definitions)
        self.catch_unfiltered_exceptions = catch_unfiltered_exceptions
        self._finalizers: List[Finalizer] = list(finalizers or [])

    def add_finalizer(self, finalizer: Finalizer) -> Finalizer:
        """Register a post-processing callable; usable as a decorator"""
        self._finalizers.append(finalizer)
        return finalizer

    def already_finalized(self, exc: Exception) -> bool:
        """True when this translator already ran ``on_exception`` for ``exc`` and let it propagate"""
        return getattr(exc, FINALIZED_BY_ATTR, None) is self

    def _translate(self, exc: Exception) -> Tuple[Optional[ExceptionDefinition], Optional[TranslationOutcome]]:
        definition = self.rules.find_match(exc)
        if definition is None and not self.catch_unfiltered_exceptions:
            return None, None

        if definition is None:
            return None, TranslationOutcome(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                payload=HttpError(message=exception_message(exc)),
            )

        payload = HttpError(
            message=definition.message_for(exc),
            error_code=definition.error_code or None,
            error_reference=definition.error_reference or None,
        )
        return definition, TranslationOutcome(status_code=definition.status_code, payload=payload)

    def translate(self, exc: Exception) -> Optional[TranslationOutcome]:
        """Outcome for ``exc``, or None when it should propagate unchanged"""
        return self._translate(exc)[1]

    def on_exception(self, exc: Exception, request: Optional[Request] = None) -> ExceptionContext:
        definition, outcome = self._translate(exc)
        context = ExceptionContext(exc, request=request, definition=definition, outcome=outcome)
        self.finalize(context)
        return context

    def finalize(self, context: ExceptionContext) -> None:
        """Runs after every exception, whether or not a response was set"""
        exc = context.exception
        extra = {"exception_type": type(exc).__name__}
        if context.request is not None:
            extra["path"] = context.request.url.path
            extra["method"] = context.request.method

        if context.definition is not None:
            extra["status_code"] = context.outcome.status_code
            logger.warning(f"Translated exception: {type(exc).__name__}", extra=extra)
        elif context.handled:
            extra["status_code"] = context.outcome.status_code
            logger.error(f"Caught unfiltered exception: {exc}", extra=extra, exc_info=exc)
        else:
            logger.debug(f"No definition for {type(exc).__name__}, propagating", extra=extra)

        for finalizer in self._finalizers:
            finalizer(context)

    def translate_exceptions(self, endpoint: Callable) -> Callable:
        """
        Apply the translator to a single endpoint instead of the whole app.

        HTTP exceptions raised by the endpoint are left for the framework.
        Exceptions it lets through are marked so that middleware installed
        with the same translator does not finalize them a second time.
        """
        if inspect.iscoroutinefunction(endpoint):
            @functools.wraps(endpoint)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await endpoint(*args, **kwargs)
                except StarletteHTTPException:
                    raise
                except Exception as exc:
                    context = self.on_exception(exc, _find_request(args, kwargs))
                    if not context.handled:
                        setattr(exc, FINALIZED_BY_ATTR, self)
                        raise
                    return context.response
            return async_wrapper

        @functools.wraps(endpoint)
        def wrapper(*args, **kwargs):
            try:
                return endpoint(*args, **kwargs)
            except StarletteHTTPException:
                raise
            except Exception as exc:
                context = self.on_exception(exc, _find_request(args, kwargs))
                if not context.handled:
                    setattr(exc, FINALIZED_BY_ATTR, self)
                    raise
                return context.response
        return wrapper


def _find_request(args: tuple, kwargs: dict) -> Optional[Request]:
    for value in (*args, *kwargs.values()):
        if isinstance(value, Request):
            return value
    return None
