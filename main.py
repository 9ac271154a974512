import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from core.config import ALLOWED_ORIGINS
from core.logging_config import setup_logging, get_logger
from routers.auth import router as auth_router
from routers.dashboard import router as dashboard_router
from routers.interview import router as interview_router
from services.dependencies import get_document_store
from services.document_store import PostgresDocumentStore
from services.rate_limiter import limiter, rate_limit_exceeded_handler

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = get_document_store()
    if isinstance(store, PostgresDocumentStore):
        await asyncio.to_thread(store.ensure_schema)
        logger.info("Document table '%s' ready", store.table)
    yield


app = FastAPI(title="Interview Feedback API", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Enable CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(interview_router)
app.include_router(dashboard_router)


@app.get("/")
def read_root():
    return {"message": "Welcome to Interview Feedback API"}


@app.get("/health")
def health():
    return {"status": "ok"}
