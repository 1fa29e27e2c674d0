import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError
from starlette import status

from core.config import settings
from core.database import engine, AsyncSessionLocal
from models.base import Base
from services.events import build_publisher
from services.telegram_notifier import create_telegram_publisher

from routers.swipe import router as swipe_router
from routers.discovery import router as discovery_router
from routers.match import router as match_router
from routers.profile import router as profile_router
from routers.safety import router as safety_router
from routers.message import router as message_router
from routers.health import router as health_router

app = FastAPI(
    title="Matching Engine Backend",
    version="0.1.0",
    description="Свайпы, матчи, отмена свайпа и лента кандидатов для приложения знакомств"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response


@app.exception_handler(OperationalError)
async def storage_unavailable(request: Request, exc: OperationalError):
    logger.warning(f"{request.method} {request.url.path} storage error: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Storage temporarily unavailable"},
    )


app.include_router(swipe_router)
app.include_router(discovery_router)
app.include_router(match_router)
app.include_router(profile_router)
app.include_router(safety_router)
app.include_router(message_router)
app.include_router(health_router)


@app.on_event("startup")
async def on_startup():

    # Сначала создаём все таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    telegram_publisher = create_telegram_publisher(settings.TELEGRAM_BOT_TOKEN, AsyncSessionLocal)
    app.state.event_publisher = build_publisher(telegram_publisher)
    app.state.telegram_publisher = telegram_publisher


@app.get("/")
async def root():
    return {"message": "Matching Engine Backend"}


@app.on_event("shutdown")
async def shutdown():
    telegram_publisher = getattr(app.state, "telegram_publisher", None)
    if telegram_publisher is not None:
        await telegram_publisher.bot.session.close()
    # Закрываем все соединения пула
    await engine.dispose()
