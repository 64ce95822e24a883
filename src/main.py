"""Shop backend FastAPI application.

Usage:
    python src/main.py
    uvicorn main:app --app-dir src --host 0.0.0.0 --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import cart, catalog, orders, users
from db.database import connect
from utils import config
from utils.errors import ShopError
from utils.logger import get_logger

_logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # first connection creates the schema if the database is new
    async with connect():
        pass
    _logger.info("Shop backend ready.")
    yield


async def handle_shop_error(request: Request, exc: ShopError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in e["loc"][1:]), "message": e["msg"]}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=400, content={"message": "Invalid request", "errors": errors}
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    _logger.error(
        f"Unhandled error on {request.method} {request.url.path}", exc_info=exc
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Shop API",
        description="Catalog, carts and orders with stock reservation",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-User-Email"],
    )

    app.add_exception_handler(ShopError, handle_shop_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    api = APIRouter(prefix="/api")
    api.include_router(users.router)
    api.include_router(catalog.category_router)
    api.include_router(catalog.product_router)
    api.include_router(cart.router)
    api.include_router(orders.router)
    app.include_router(api)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    run()
