# main.py
from __future__ import annotations
import sys
from typing import Optional, Sequence

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from blocklist_manager.api.exception_handlers import EXCEPTION_HANDLERS
from blocklist_manager.api.router import router
from blocklist_manager.core.config import Settings
from blocklist_manager.core.exceptions import ConfigurationError
from blocklist_manager.core.import_guard import ImportGuard
from blocklist_manager.core.paths import ui_dir_or_none
from blocklist_manager.core.plugin import introspect, serve_and_recv_spec
from blocklist_manager.core.zoraxy_client import ZoraxyClient
from blocklist_manager.services.importer import ImportService
from blocklist_manager.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def create_app(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> FastAPI:
    """
    Build the plugin's FastAPI app.

    Pass ``http_client`` to talk to something other than a real Zoraxy; an injected
    client is left open on shutdown, one created here is closed.
    """
    settings.require_upstream()

    owns_client = http_client is None
    if http_client is None:
        http_client = httpx.AsyncClient(
            headers={"User-Agent": settings.user_agent},
            timeout=settings.request_timeout,
        )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    zoraxy_client = ZoraxyClient(settings.zoraxy_base_url, settings.api_key, http_client)
    app.state.settings = settings
    app.state.zoraxy_client = zoraxy_client
    # Only allow one import at a time, to avoid overwhelming the Zoraxy API.
    app.state.import_guard = ImportGuard()
    app.state.import_service = ImportService(zoraxy_client, app.state.import_guard)

    for exc_type, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exc_type, handler)

    # Mount all routes
    app.include_router(router, prefix="/api")

    ui_dir = ui_dir_or_none(settings.ui_dir)
    if ui_dir:
        app.mount("/ui", StaticFiles(directory=ui_dir, html=True), name="ui")

        @app.get("/", include_in_schema=False)
        def root():
            return RedirectResponse(url="/ui/")
    else:
        logger.warning(f"UI directory {settings.ui_dir} not found, serving API only")

    @app.on_event("shutdown")
    async def _drain_imports_and_close():
        service: ImportService = app.state.import_service
        if service.active_jobs:
            logger.info(f"Waiting for {service.active_jobs} import job(s) to finish")
        await service.wait_idle()
        if owns_client:
            await http_client.aclose()

    return app


def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging()
    try:
        runtime_cfg = serve_and_recv_spec(argv if argv is not None else sys.argv, introspect())
        settings = Settings().apply_runtime_config(runtime_cfg)
        app = create_app(settings)
    except ConfigurationError as e:
        logger.critical(f"Cannot start plugin: {e.message}")
        sys.exit(1)

    logger.info(
        f"Blocklist Import Plugin initialized with port: {settings.port}, "
        f"zoraxy_port: {settings.zoraxy_port}"
    )
    logger.info(f"Blocklist Import Plugin UI ready at http://{settings.host}:{settings.port}/ui/")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
