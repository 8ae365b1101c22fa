# app/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.db import init_db, close_db
from app.core.errors import ServiceError
from app.core.pubsub import Channel

from app.api.v1.routers import auth, users, appointments, hotline, chat, admin
from app.api.v1.routers.ws_notifications import router as ws_notifications_router

from app.core.bootstrap import ensure_default_admin
logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# One notification channel per application; routes receive it through deps.get_channel
app.state.channel = Channel()

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    """
    Domain errors -> {"detail": {"code", "message"}} with the error's status.
    """
    if exc.status_code >= 500:
        logger.error("[error] %s %s -> %s", request.method, request.url.path, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_dict()})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Malformed requests are reported as 400 VALIDATION_ERROR rather than 422.
    """
    logger.info("[error] validation failed for %s: %s", request.url.path, exc.errors())
    detail = {"code": "VALIDATION_ERROR", "message": "Invalid request", "errors": jsonable_encoder(exc.errors())}
    return JSONResponse(status_code=400, content={"detail": detail})

@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("[error] unhandled exception on %s %s", request.method, request.url.path)
    detail = {"code": "INTERNAL_ERROR", "message": "Internal server error"}
    if not settings.is_production:
        detail["debug"] = repr(exc)
    return JSONResponse(status_code=500, content={"detail": detail})

@app.on_event("startup")
async def on_startup():
    await init_db()
    # Ensure there's a default admin account on first run
    await ensure_default_admin()
    logger.info("[startup] %s ready (env=%s)", settings.APP_NAME, settings.env)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(appointments.router, prefix="/api/v1")
app.include_router(hotline.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")

# WebSocket
app.include_router(ws_notifications_router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
