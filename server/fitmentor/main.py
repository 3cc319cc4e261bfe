from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from bson import ObjectId
from datetime import datetime, timezone
import json
import logging

from fitmentor.config import CORS_ORIGINS
from fitmentor.database.connection import ensure_indexes
from fitmentor.routers import admin, auth, photos, plan, progress

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# Custom JSON encoder for MongoDB ObjectId and datetime
class MongoJSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class MongoJSONResponse(JSONResponse):
    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
            cls=MongoJSONEncoder
        ).encode("utf-8")


app = FastAPI(title="FitMentor API", version="1.0.0", default_response_class=MongoJSONResponse)

app.add_middleware(GZipMiddleware, minimum_size=1000)

# CORS middleware to allow frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(plan.router)
app.include_router(progress.router)
app.include_router(photos.router)
app.include_router(admin.router)


@app.on_event("startup")
def _app_startup():
    # Ensure collection indexes exist (idempotent)
    try:
        ensure_indexes()
    except Exception as e:
        logger.warning(f"Could not ensure indexes: {e}")


@app.get("/")
def home():
    return {"message": "FitMentor API Running"}


@app.get("/health")
def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}
