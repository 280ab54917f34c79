"""
FastAPI app

- Volunteer operations backend for event stations and case management
- CORS configured for the web portal and station tablets
- Single router for all endpoints, mounted at /api
- Basic health check
"""
from pathlib import Path
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables from .env file early
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / '.env')

from app.api import router
from app.core.config import CORS_ORIGINS, LOG_LEVEL, LOG_FORMAT
from app.core.logging_config import setup_logging
from app.api.middleware import TimingMiddleware

setup_logging(LOG_LEVEL, LOG_FORMAT)

app = FastAPI(title="Volunteer Ops API")

# Logs request duration and acting user for all requests
app.add_middleware(TimingMiddleware)

# Explicitly allow the X-User-* identity headers set by the portal
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    """
    Basic health check
    """
    return {"status": "ok"}
