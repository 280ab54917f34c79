"""
Basic configuration

- CORS origins for development and production
- Storage location and cache TTL for the JSON document store
- Referral SLA window, public rate limits and logging options
- Supports environment variables for deployment overrides
"""
import os

# Default localhost origins for development
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
]

# Get additional CORS origins from environment variable
ADDITIONAL_CORS_ORIGINS = os.getenv("CORS_ORIGINS", "").split(",") if os.getenv("CORS_ORIGINS") else []

# Filter out empty strings from split
ADDITIONAL_CORS_ORIGINS = [origin.strip() for origin in ADDITIONAL_CORS_ORIGINS if origin.strip()]

# Combine default and additional origins
CORS_ORIGINS = DEFAULT_CORS_ORIGINS + ADDITIONAL_CORS_ORIGINS

# Root directory for collection files (one JSON array per collection)
DATA_DIR = os.getenv("VOLUNTEER_OPS_DATA_DIR", "data")

# Seconds a collection stays in the in-memory cache
CACHE_TTL_SECONDS = int(os.getenv("CACHE_TTL_SECONDS", "60"))

# Referral first-contact window
SLA_HOURS = int(os.getenv("SLA_HOURS", "72"))

# Upper bound on review queue length returned per poll
REVIEW_QUEUE_LIMIT = int(os.getenv("REVIEW_QUEUE_LIMIT", "200"))

# Default look-back window for the flagged screenings list
FLAGGED_LOOKBACK_DAYS = int(os.getenv("FLAGGED_LOOKBACK_DAYS", "90"))

# Public portal limits per client IP and route within one window
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
PUBLIC_RSVP_RATE_LIMIT = int(os.getenv("PUBLIC_RSVP_RATE_LIMIT", "10"))
PUBLIC_CHECKIN_RATE_LIMIT = int(os.getenv("PUBLIC_CHECKIN_RATE_LIMIT", "20"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")
