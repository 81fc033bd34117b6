from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import socketio
import os
from shared.database import devices_db, emergencies_db
from shared.business_logic import to_iso, utc_now
from shared.emergency_service import emergency_service
from shared.exceptions import StoreError
from app.socket_manager import sio, CORS_ORIGINS
from app.routers import devices, sos

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))

ENDPOINTS = [
    "GET /api/test",
    "POST /api/devices/register",
    "POST /api/health",
    "GET /api/devices",
    "GET /api/devices/:deviceId",
    "PUT /api/devices/:deviceId",
    "DELETE /api/devices/:deviceId",
    "POST /api/sos",
    "GET /api/emergencies",
    "GET /api/emergencies/history",
    "POST /api/emergencies/:id/resolve"
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await devices_db.connect()
    await emergencies_db.connect()
    emergency_service.start_session()
    print("🚀 Elder Care API started")
    yield
    await devices_db.disconnect()
    await emergencies_db.disconnect()
    print("Elder Care API stopped")


# FastAPI App
fastapi_app = FastAPI(title="Elder Care API", version="1.0.0", lifespan=lifespan)

# CORS
fastapi_app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Socket.IO - Wrap FastAPI app
socket_app = socketio.ASGIApp(sio, fastapi_app)


# Error envelopes
@fastapi_app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message}
    )


@fastapi_app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    print(f"Invalid body on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": "Datos inválidos"}
    )


@fastapi_app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Endpoint no encontrado" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": message},
        headers=getattr(exc, "headers", None)
    )


@fastapi_app.get("/")
async def root():
    return {
        "success": True,
        "message": "Elder Care API v1.0",
        "endpoints": ENDPOINTS,
        "timestamp": to_iso(utc_now())
    }


@fastapi_app.get("/api/test")
async def api_test():
    return {
        "success": True,
        "message": "✅ API funcionando correctamente",
        "timestamp": to_iso(utc_now())
    }


@fastapi_app.get("/health")
async def health():
    """Health check endpoint for Docker"""
    return {"status": "healthy"}


# Include Routers
fastapi_app.include_router(devices.router, prefix="/api", tags=["Devices"])
fastapi_app.include_router(sos.router, prefix="/api", tags=["SOS"])


if __name__ == "__main__":
    import uvicorn

    print(f"🌍 Listening on {HOST}:{PORT}")
    uvicorn.run(socket_app, host=HOST, port=PORT)
