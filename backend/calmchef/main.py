from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging

from .api.routes import router as api_router
from .api.websocket import router as ws_router
from .core.config import get_settings

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

app = FastAPI(title="calmchef", version="0.1.0", description="Calm, guided cooking assistant")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # Clients only understand {"error": ...} bodies.
    return JSONResponse({"error": "Invalid request."}, status_code=400)


# Routers BEFORE static files mount
app.include_router(api_router)
app.include_router(ws_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok", "message": "calmchef API is running", "openai_configured": bool(settings.openai_api_key)}


# Serve the front end if one is built (this should be LAST)
static_dir = Path("frontend/static")
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
