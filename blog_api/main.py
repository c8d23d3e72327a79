import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from blog_api import __version__
from blog_api.config import settings
from blog_api.database import engine
from blog_api.exceptions import install_exception_handlers
from blog_api.middleware import RequestLoggingMiddleware
from blog_api.routers import auth, blogs

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Blog API starting (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="Blog API",
    description="Multi-user blogging backend: accounts, posts and nested comments",
    version=__version__,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

# Routers
app.include_router(auth.router)
app.include_router(blogs.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": __version__}
