"""Application lifecycle event handlers."""

from typing import Callable

from fastapi import FastAPI

from domains.core import PersistenceError, get_logger

from app.core.deps import get_default_note_service

logger = get_logger(__name__)


def create_start_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        logger.info("api_starting", component="api")

        service = getattr(app.state, "note_service", None)
        if service is None:
            service = get_default_note_service()
            app.state.note_service = service

        # 加载失败不阻止启动，内存集合作为本次会话的数据源
        try:
            hydrated = await service.initialize()
            logger.info(
                "note_store_initialized",
                component="note_store",
                hydrated=hydrated,
                total=service.store.count(),
            )
        except PersistenceError as e:
            logger.error(
                "note_store_load_failed",
                component="note_store",
                code=e.code,
                error=e.message,
            )

    return start_app


def create_stop_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        service = getattr(app.state, "note_service", None)
        if service is not None:
            await service.close()
            error = service.store.last_save_error
            if error is not None:
                logger.error("note_store_unsaved_on_shutdown", component="note_store", error=error.message)
        logger.info("api_stopped", component="api")

    return stop_app
