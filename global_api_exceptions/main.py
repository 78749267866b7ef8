"""
Global API Exceptions - Application factory
Wires the exception translator into a FastAPI host application
"""

from fastapi import FastAPI
from datetime import datetime, timezone
from typing import Iterable, Optional
import os
import logging

from global_api_exceptions.config import Settings, settings as default_settings
from global_api_exceptions.core.definitions import ExceptionDefinition
from global_api_exceptions.core.logging_config import setup_logging
from global_api_exceptions.core.middleware import install_exception_translator
from global_api_exceptions.core.translator import GlobalExceptionTranslator

logger = logging.getLogger("global_api_exceptions.main")


def create_app(
    definitions: Optional[Iterable[ExceptionDefinition]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build a FastAPI app whose unhandled exceptions go through the translator"""
    settings = settings or default_settings
    setup_logging(log_level=settings.log_level, log_file=settings.log_file)

    app = FastAPI(
        title=settings.app_name,
        version=settings.version,
        debug=settings.debug,
    )

    translator = GlobalExceptionTranslator(
        definitions,
        catch_unfiltered_exceptions=settings.catch_unfiltered_exceptions,
    )
    install_exception_translator(app, translator)
    app.state.exception_translator = translator

    logger.info(
        f"Exception translator installed with {len(translator.rules)} definition(s), "
        f"catch_unfiltered_exceptions={translator.catch_unfiltered_exceptions}"
    )

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.app_name,
            "version": settings.version,
        }

    return app


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(create_app(), host="0.0.0.0", port=port)
