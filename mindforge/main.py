import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mindforge.api.routes import router
from mindforge.core.config import settings


app = FastAPI(title="MindForge Planning Agent API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ALLOW_ORIGINS.split(",") if o.strip()],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
)
app.include_router(router, prefix="/v1")


def run():
    uvicorn.run("mindforge.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
