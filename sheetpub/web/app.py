"""HTTP routes: config listing and admin publish endpoints."""

from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from sheetpub import __version__
from sheetpub.auth.roles import Role, resolve_role
from sheetpub.config.schema import Settings, TableDescriptor
from sheetpub.publisher import BatchResult, Publisher


def caller_token(request: Request) -> str | None:
    """Token from the ``token`` query parameter or an ``Authorization: Bearer`` header."""
    token = request.query_params.get("token")
    if token:
        return token
    auth = request.headers.get("authorization", "")
    scheme, _, value = auth.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def create_app(settings: Settings, publisher: Publisher | None = None) -> FastAPI:
    """Build the FastAPI app around explicit settings and an optional publisher."""
    publisher = publisher or Publisher(settings)

    app = FastAPI(title="sheetpub", version=__version__, docs_url=None, redoc_url=None)
    app.state.settings = settings
    app.state.publisher = publisher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def hide_method_mismatch(request: Request, exc: StarletteHTTPException):
        # A known path with the wrong method reads as an unknown path.
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "not found"})
        return await http_exception_handler(request, exc)

    def caller_role(request: Request) -> Role:
        return resolve_role(caller_token(request), settings)

    def require_viewer(role: Role = Depends(caller_role)) -> Role:
        if not role.can_view:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return role

    def require_admin(role: Role = Depends(caller_role)) -> Role:
        if not role.can_publish:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
        return role

    @app.get("/health", response_class=PlainTextResponse)
    async def health() -> str:
        return "ok"

    @app.get("/config.json", response_model=list[TableDescriptor])
    async def list_config(_: Role = Depends(require_viewer)) -> list[TableDescriptor]:
        return publisher.list_config()

    @app.post("/api/admin/publish")
    async def publish_one(
        table: str = Query(..., min_length=1),
        _: Role = Depends(require_admin),
    ) -> JSONResponse:
        if settings.get_table(table) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="not found")

        logger.info(f"Publish requested for '{table}'")
        result = await publisher.publish_one(table)
        if not result.ok:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": result.message, "table": table},
            )
        return JSONResponse(content={"success": True, "table": table, "rows": result.rows})

    @app.post("/api/admin/publish-all", response_model=BatchResult, response_model_exclude_none=True)
    async def publish_all(_: Role = Depends(require_admin)) -> BatchResult:
        logger.info("Batch publish requested")
        return await publisher.publish_all()

    return app
