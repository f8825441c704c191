# lucid_backend/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lucid_backend.config import settings
from lucid_backend.infrastructure.db.bootstrap import dispose_engine, init_engine
from lucid_backend.api.dream.routes import router as dream_router
from lucid_backend.api.embedding.routes import router as embedding_router, similar_router
from lucid_backend.api.gamification.routes import router as gamification_router

logging.basicConfig(
    level=settings().log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_engine(settings())
    logger.info("Lucid backend started")
    yield
    await dispose_engine()


app = FastAPI(title="Lucid backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dream_router)
app.include_router(embedding_router)
app.include_router(similar_router)
app.include_router(gamification_router)


@app.get("/health")
async def health():
    return {"status": "ok"}
