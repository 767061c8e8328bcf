from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from smartspend.core.config import settings
from smartspend.routers import chat, health, insights, plaid, uploads

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CLIENT_ORIGIN],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Root endpoint
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}


# Register routers
app.include_router(health.router, prefix=f"{settings.API_PREFIX}", tags=["Health"])  # /api/health
app.include_router(plaid.router, prefix=f"{settings.API_PREFIX}/plaid", tags=["Plaid"])
app.include_router(uploads.router, prefix=f"{settings.API_PREFIX}", tags=["Uploads"])  # /api/upload-csv
app.include_router(insights.router, prefix=f"{settings.API_PREFIX}", tags=["Insights"])  # /api/insights
app.include_router(chat.router, prefix=f"{settings.API_PREFIX}", tags=["Chat"])  # /api/chat

logger.info(f"{settings.PROJECT_NAME} API ready at {settings.API_PREFIX}")
