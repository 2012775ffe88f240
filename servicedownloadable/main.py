import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from servicedownloadable.config import settings
from servicedownloadable.database import create_db_and_tables
from servicedownloadable.exceptions import ServiceDownloadableError
from servicedownloadable.routes import (
    auth,
    health,
    orders_admin,
    products_admin,
    servicedownloadable_admin,
    servicedownloadable_client,
    servicedownloadable_files,
)

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="Downloadable Products API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceDownloadableError)
async def service_error_handler(request: Request, exc: ServiceDownloadableError):
    logger.info("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(products_admin.router, prefix="/api/admin/products", tags=["Admin Products"])
app.include_router(orders_admin.router, prefix="/api/admin/orders", tags=["Admin Orders"])
app.include_router(servicedownloadable_admin.router, prefix="/api/admin/servicedownloadable", tags=["Admin Downloadable"])
app.include_router(servicedownloadable_client.router, prefix="/api/client/servicedownloadable", tags=["Client Downloadable"])
app.include_router(servicedownloadable_files.router, prefix="/servicedownloadable", tags=["Downloadable Files"])


@app.get("/")
def root():
    return {
        "auth_endpoints": [
            "/auth/login"
        ],
        "admin_product_endpoints": [
            "/api/admin/products/", "/api/admin/products/{product_id}"
        ],
        "admin_order_endpoints": [
            "/api/admin/orders/", "/api/admin/orders/{order_id}",
            "/api/admin/orders/{order_id}/{action}"
        ],
        "admin_downloadable_endpoints": [
            "/api/admin/servicedownloadable/upload",
            "/api/admin/servicedownloadable/update",
            "/api/admin/servicedownloadable/config_save",
            "/api/admin/servicedownloadable/send_file",
            "/servicedownloadable/get-file/{id}"
        ],
        "client_downloadable_endpoints": [
            "/api/client/servicedownloadable/send_file"
        ]
    }
