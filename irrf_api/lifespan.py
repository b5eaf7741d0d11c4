from __future__ import annotations

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncContextManager

from fastapi import FastAPI

from irrf_api.config import Settings, get_settings
from irrf_api.core.brackets import IRRF_TABLE_052025

Hook = Callable[[FastAPI], Awaitable[None] | None]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def _open_telemetry_sink(
    logger: logging.Logger, settings: Settings, app_label: str
) -> logging.Handler | None:
    if not settings.log_to_file:
        return None
    logs_dir = Path(settings.log_dir)
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning("Unable to create logs directory %s: %s", logs_dir, exc)
        return None
    handler = logging.FileHandler(logs_dir / f"{app_label}.log", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return handler


async def _invoke_hook(hook: Hook | None, app: FastAPI) -> None:
    if hook is None:
        return
    try:
        result = hook(app)
        if inspect.isawaitable(result):
            await result  # type: ignore[func-returns-value]
    except Exception:  # pragma: no cover - hooks are user provided
        logging.getLogger("irrf_app").exception("Application lifecycle hook failed")


def build_application_lifespan(
    app_label: str,
    *,
    startup_hook: Hook | None = None,
    shutdown_hook: Hook | None = None,
) -> Callable[[FastAPI], AsyncContextManager[None]]:
    base_logger = logging.getLogger("irrf_app")

    @asynccontextmanager
    async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
        settings = get_settings()
        logger = base_logger.getChild(app_label)
        telemetry_handler = _open_telemetry_sink(base_logger, settings, app_label)

        app.state.settings = settings
        app.state.bracket_table = IRRF_TABLE_052025
        app.state.telemetry_handler = telemetry_handler
        app.state.app_label = app_label

        logger.info(
            "Startup complete: brackets=%s cors_origins=%s trace_default=%s",
            len(IRRF_TABLE_052025),
            ",".join(settings.cors_origins) or "-",
            settings.include_trace,
        )

        try:
            await _invoke_hook(startup_hook, app)
            yield
        finally:
            await _invoke_hook(shutdown_hook, app)
            logger.info("Shutdown complete")
            if telemetry_handler is not None:
                base_logger.removeHandler(telemetry_handler)
                telemetry_handler.close()
            for attr in ("settings", "bracket_table", "telemetry_handler", "app_label"):
                if hasattr(app.state, attr):
                    delattr(app.state, attr)

    return _lifespan
