"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from modelo210.api.routes import calculations, declarations
from modelo210.config import settings
from modelo210.errors import Modelo210Error

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.api_title,
    description="Spanish non-resident property tax (Modelo 210) calculations",
    version="0.1.0",
    debug=settings.debug,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Modelo210Error)
async def modelo210_error_handler(request: Request, exc: Modelo210Error) -> JSONResponse:
    logger.warning("%s on %s: %s", exc.error_code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(calculations.router)
app.include_router(declarations.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
