"""
Middleware hooking the exception translator into a FastAPI application
"""
from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from global_api_exceptions.core.translator import GlobalExceptionTranslator


class ExceptionTranslationMiddleware(BaseHTTPMiddleware):
    """Middleware converting unhandled exceptions into friendly HTTP errors"""

    def __init__(self, app, translator: GlobalExceptionTranslator):
        super().__init__(app)
        self.translator = translator

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # HTTPException is resolved by the app's own exception middleware
        # and never surfaces here.
        try:
            return await call_next(request)
        except Exception as exc:
            if self.translator.already_finalized(exc):
                raise
            context = self.translator.on_exception(exc, request)
            if not context.handled:
                raise
            return context.response


def install_exception_translator(app: FastAPI, translator: GlobalExceptionTranslator) -> GlobalExceptionTranslator:
    """Register the translator on every route of ``app``"""
    app.add_middleware(ExceptionTranslationMiddleware, translator=translator)
    return translator
