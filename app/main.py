import logging
import uuid
from contextlib import asynccontextmanager
from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware


from app.config import AUTO_SEED_MODEL_DATA, MODEL_DATA_PATH
from app.routers.api import router as api_router
from app.routers.predictions import router as predictions_router
from app.services.evaluation_service import evaluation_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the dashboard's evaluation metrics on first start."""
    if AUTO_SEED_MODEL_DATA:
        try:
            evaluation_service.ensure_seeded(MODEL_DATA_PATH)
        except Exception as e:
            # Scoring works without metrics; the dashboard just shows none
            logger.error(f"Model evaluation seeding failed: {e}")
    logger.info("API ready to accept requests")
    yield


app = FastAPI(
    title="Liver Risk Dashboard",
    description="FastAPI application for liver disease risk screening and model evaluation metrics",
    version="1.0.0",
    lifespan=lifespan,
)

# Simple Session Middleware
class SessionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        session_id = request.cookies.get("session_id")
        created_new = False
        if not session_id:
            session_id = str(uuid.uuid4())
            created_new = True

        # Endpoints read it from request state, so the first request works too
        request.state.session_id = session_id

        response = await call_next(request)

        if created_new:
            # Set cookie for 1 day
            response.set_cookie(key="session_id", value=session_id, max_age=86400)

        return response

app.add_middleware(SessionMiddleware)

app.include_router(api_router)
app.include_router(predictions_router)

@app.get("/")
async def read_root():
    """Service summary for the dashboard front end."""
    return {
        "name": app.title,
        "version": app.version,
        "docs": app.docs_url,
    }
