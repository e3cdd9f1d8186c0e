import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from campus_events.api.v1.activities import router as activities_router
from campus_events.api.v1.auth import router as auth_router
from campus_events.api.v1.categories import router as categories_router
from campus_events.api.v1.users import router as users_router
from campus_events.config.settings import settings
from campus_events.core.handlers import register_exception_handlers
from campus_events.db.base import Base
from campus_events.db.session import engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

tags_metadata = [
    {
        "name": "auth",
        "description": "Registration, login and token refresh.",
    },
    {
        "name": "activities",
        "description": "Browse, create and engage with campus activities.",
    },
    {
        "name": "categories",
        "description": "Activity categories, managed by Student Senate and admins.",
    },
    {
        "name": "users",
        "description": "User profiles and administration.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"Campus Events server starting on port {settings.PORT}")
    yield
    logger.info("Shutting down gracefully...")
    engine.dispose()


app = FastAPI(
    title="Campus Events API",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# CORS policy
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
def health():
    return {"status": "OK", "message": "Campus Events server is running!"}


app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(activities_router, prefix="/api/activities", tags=["activities"])
app.include_router(categories_router, prefix="/api/categories", tags=["categories"])
app.include_router(users_router, prefix="/api/users", tags=["users"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
