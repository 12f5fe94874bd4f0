from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

import config
from routes import games_router, stats_router, settings_router
from services import (
    PuzzleContentStore,
    SchedulerTimers,
    SessionRegistry,
    build_scheduler,
    get_registry,
    on_loop,
    set_registry,
)
from stores import StoreError, close_store, init_store

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- FastAPI setup ---
app = FastAPI(title="Wuzzler")

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT"],
    allow_headers=["*"],
)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"[STORE] {request.method} {request.url.path}: {exc}")
    status = 503 if exc.retryable else 500
    return JSONResponse(status_code=status, content={"detail": "Storage unavailable"})


@app.get("/", include_in_schema=False)
async def root():
    return {"games": ["diagone", "rhymeagrams", "tumblepuns"]}


# --- Register routes ---
app.include_router(games_router, prefix="/games")
app.include_router(stats_router, prefix="/stats")
app.include_router(settings_router, prefix="/settings")

# --- Scheduler setup ---
scheduler = build_scheduler()


@app.on_event("startup")
async def startup_event():
    store = await init_store(config.DB_PATH)
    registry = SessionRegistry(store, PuzzleContentStore(config.CONTENT_DIR), SchedulerTimers(scheduler))
    set_registry(registry)
    scheduler.add_job(on_loop(registry.roll_over), trigger="cron", hour=0, minute=0)  # midnight UTC
    scheduler.start()
    logger.info(f"Started with store at {config.DB_PATH or ':memory:'}")


@app.on_event("shutdown")
async def shutdown_event():
    get_registry().close()
    set_registry(None)
    scheduler.shutdown()
    await close_store()
