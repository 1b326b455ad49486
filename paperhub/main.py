import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from paperhub.config import settings
from paperhub.api.chat.routes import router as chat_router
from paperhub.api.comments.routes import router as comments_router
from paperhub.api.likes.routes import router as likes_router
from paperhub.api.tools.routes import router as tools_router

# Table creation on startup
from contextlib import asynccontextmanager
from paperhub.db.init_db import init

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init()
    logger.info("PaperHub API started (env=%s)", settings.ENV)
    yield

app = FastAPI(title="PaperHub API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(chat_router, prefix="/api/chat", tags=["Chat"])
app.include_router(comments_router, prefix="/comments", tags=["Comments"])
app.include_router(likes_router, prefix="/likes", tags=["Likes"])
app.include_router(tools_router, prefix="/tools", tags=["Tools"])

@app.get("/ping")
def ping():
    return {"message": "pong"}
