from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from question_search.config import Settings, load_retry_policy, load_settings
from question_search.index import CollectionManager, TypesenseClient, get_typesense_client
from question_search.search import SearchService

from .routers.search import router as search_router


# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


"""
FastAPI application

Startup ordering: the questions collection is provisioned inside the lifespan
startup phase. ASGI servers such as uvicorn only bind the listening socket
after lifespan startup has completed, so no search request is accepted before
the index exists. If provisioning fails (backend unreachable, retries
exhausted, or a permanent error) the exception aborts startup.

OpenAPI/Swagger docs are only served when APP_ENV=development. They are
registered as explicit JSONResponse-based routes because some FastAPI/Starlette
combinations serve the schema as "application/vnd.oai.openapi+json", which
strict Accept headers reject with 406.
"""

# Optional base path for deployments under a subpath; used as the ASGI
# root_path and advertised via OpenAPI "servers".
_env_base_path = os.getenv("API_BASE_PATH", "").strip()
if _env_base_path and not _env_base_path.startswith("/"):
    _env_base_path = "/" + _env_base_path
if _env_base_path.endswith("/") and _env_base_path != "/":
    _env_base_path = _env_base_path.rstrip("/")


def create_app(
    *,
    settings: Optional[Settings] = None,
    client: Optional[TypesenseClient] = None,
) -> FastAPI:
    """Build the application.

    ``settings`` and ``client`` default to values derived from the
    environment when the app starts; passing them in skips that lookup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or load_settings()
        owns_client = client is None
        ts_client = client or get_typesense_client(resolved, load_retry_policy())

        app.state.settings = resolved
        app.state.index_ready = False
        try:
            manager = CollectionManager(ts_client, name=resolved.collection_name)
            await manager.ensure_collection()
            app.state.index_ready = True
            app.state.search_service = SearchService(
                ts_client,
                collection_name=resolved.collection_name,
                timeout_s=resolved.search_timeout_s,
            )
            logger.info("Index '%s' ready, accepting requests", resolved.collection_name)
            yield
        finally:
            if owns_client:
                await ts_client.aclose()

    app = FastAPI(
        title="Question Search",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        root_path=_env_base_path or "",
    )

    # CORS: allow browser apps hosted on other origins to call this API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(search_router)

    @app.get("/health", tags=["ops"], summary="Health check")
    async def health(request: Request):
        # Requests are only served once the lifespan has provisioned the index.
        return {"status": "ok", "index_ready": request.app.state.index_ready}

    def _require_development(request: Request) -> None:
        current = getattr(request.app.state, "settings", None)
        if current is None or not current.is_development:
            raise HTTPException(status_code=404, detail="Not Found")

    @app.get("/openapi.json", include_in_schema=False)
    def openapi_json(request: Request):
        _require_development(request)
        schema = app.openapi()
        # Copy-on-write: FastAPI caches app.openapi()
        if _env_base_path and _env_base_path != "/":
            schema = {**schema, "servers": [{"url": _env_base_path}]}
        return JSONResponse(schema)

    # Relative openapi_url so the UI works behind a subpath.
    @app.get("/docs", include_in_schema=False)
    def swagger_ui(request: Request):
        _require_development(request)
        return get_swagger_ui_html(openapi_url="openapi.json", title="Question Search API Docs")

    return app


app = create_app()
