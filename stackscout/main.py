from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from stackscout.api.errors import register_exception_handlers
from stackscout.api.routes import research, validate
from stackscout.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"StackScout starting (auth_disabled={settings.auth_disabled})")
    yield


app = FastAPI(
    title="StackScout",
    description="Tech stack research for product plans, powered by Claude and Perplexity",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Routes
app.include_router(research.router)
app.include_router(validate.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "stackscout"}
