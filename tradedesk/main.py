import datetime
import os
import platform
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradedesk.core.database import get_db
from tradedesk.core.exceptions import TradeDeskError
from tradedesk.core.init_db import init_database, seed_all
from tradedesk.core.logging import setup_logger
from tradedesk.core.version import API_PREFIX, get_version_info
from tradedesk.models.error import ErrorResponse
from tradedesk.routers import (
    admin_router,
    auth_router,
    commodity_router,
    notification_router,
    order_router,
    superadmin_router,
    wallet_router,
)

logger = setup_logger("tradedesk.main")
version_info = get_version_info()

app = FastAPI(
    title=version_info["name"],
    description=version_info["description"],
    version=version_info["version"],
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=f"{API_PREFIX}/redoc",
    openapi_url=f"{API_PREFIX}/openapi.json",
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

APP_START_TIME = time.time()


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Logs every HTTP request and its response time"""
    req_id = str(id(request))[:8]
    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path
    query = str(request.url.query) if request.url.query else ""
    user_agent = request.headers.get("user-agent", "unknown")

    logger.info(f"[REQ:{req_id}] {client_ip} - {method} {path} - {query} - {user_agent}")

    start_time = time.time()
    try:
        response = await call_next(request)

        process_time = time.time() - start_time
        if process_time < 1:
            time_str = f"{process_time * 1000:.2f}ms"
        else:
            time_str = f"{process_time:.2f}s"

        logger.info(f"[RES:{req_id}] {response.status_code} - {time_str}")
        return response
    except Exception as e:
        logger.error(f"[ERR:{req_id}] Unhandled exception: {str(e)}", exc_info=True)
        raise


@app.exception_handler(TradeDeskError)
async def tradedesk_error_handler(request: Request, exc: TradeDeskError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.error_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


try:
    init_database()
    logger.info("Database initialized")
except Exception as e:
    logger.error(f"Database initialization failed: {e}", exc_info=True)

ERROR_RESPONSES = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409)
}

logger.info("Registering API routers")
app.include_router(auth_router, prefix=f"{API_PREFIX}/auth", responses=ERROR_RESPONSES)
app.include_router(commodity_router, prefix=f"{API_PREFIX}/commodities", responses=ERROR_RESPONSES)
app.include_router(order_router, prefix=f"{API_PREFIX}/orders", responses=ERROR_RESPONSES)
app.include_router(wallet_router, prefix=f"{API_PREFIX}/wallet", responses=ERROR_RESPONSES)
app.include_router(notification_router, prefix=f"{API_PREFIX}/notifications", responses=ERROR_RESPONSES)
app.include_router(admin_router, prefix=f"{API_PREFIX}/admin", responses=ERROR_RESPONSES)
app.include_router(superadmin_router, prefix=f"{API_PREFIX}/superadmin", responses=ERROR_RESPONSES)


def get_system_info():
    """Host details for the startup log"""
    return {
        "platform": platform.platform(),
        "python": platform.python_version(),
        "cpu_cores": os.cpu_count() or 0,
        "hostname": platform.node(),
        "time": datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "db_url": (
            os.environ.get("DB_CONN_STRING", "").split("@")[-1]
            if os.environ.get("DB_CONN_STRING")
            else "default"
        ),
    }


@app.on_event("startup")
async def startup_event():
    logger.info("=" * 50)
    logger.info(f"Starting {version_info['name']} {version_info['version']}...")
    logger.info(f"System info: {get_system_info()}")

    db_gen = get_db()
    db = next(db_gen)
    try:
        seed_all(db)
        logger.info("Application started")
    except Exception as e:
        logger.error(f"Startup seeding failed: {e}", exc_info=True)
    finally:
        db_gen.close()
        logger.info("=" * 50)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {version_info['name']}")


@app.get(f"{API_PREFIX}/", include_in_schema=False)
async def root():
    return {
        "message": f"Welcome to {version_info['name']}",
        "version": version_info["version"],
        "docs_url": f"{API_PREFIX}/docs",
    }


@app.get(f"{API_PREFIX}/health", tags=["system"])
async def health():
    """Liveness probe with uptime"""
    uptime_seconds = int(time.time() - APP_START_TIME)
    days, remainder = divmod(uptime_seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)

    return {
        "status": "ok",
        "timestamp": time.time(),
        "uptime_seconds": uptime_seconds,
        "uptime": f"{days}d {hours}h {minutes}m {seconds}s",
        "server_time": datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    }
