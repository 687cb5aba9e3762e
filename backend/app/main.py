# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.core.db import init_db, close_db
from app.core.bootstrap import ensure_caretaker_directory, ensure_game_catalog
from app.core.pubsub import channel
from app.services.dispatcher import Dispatcher
from app.services.message_store import MessageStore

from app.api.v1.routers import auth, chat, caretakers, games
from app.api.v1.routers.ws_chat import router as ws_chat_router

logger = logging.getLogger("uvicorn.error")
logger.setLevel(settings.log_level)

app = FastAPI(title=settings.APP_NAME)

# One store and one dispatcher per process, reached through app.state
app.state.message_store = MessageStore()
app.state.dispatcher = Dispatcher(app.state.message_store, channel)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    await init_db()
    await ensure_caretaker_directory()
    await ensure_game_catalog()

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(chat.router, prefix="/api/v1")
app.include_router(caretakers.router, prefix="/api/v1")
app.include_router(games.router, prefix="/api/v1")

# WebSocket
app.include_router(ws_chat_router)

@app.get("/healthz")
def healthz():
    return {"ok": True}
