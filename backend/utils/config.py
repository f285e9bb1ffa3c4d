"""Configuration from environment."""
import os

PORT = int(os.environ.get("PORT", "8001"))

# Simulator cadence and per-object history bound.
TICK_INTERVAL_S = float(os.environ.get("TICK_INTERVAL_S", "3.0"))
HISTORY_LIMIT = int(os.environ.get("HISTORY_LIMIT", "10"))

# One-shot device location fix; fallback position is used after this.
GEOLOCATION_TIMEOUT_S = float(os.environ.get("GEOLOCATION_TIMEOUT_S", "5.0"))

TRACKING_BASE_URL = os.environ.get("TRACKING_BASE_URL", "https://cobli-clone.app/track")

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS",
        "http://localhost:8080,http://127.0.0.1:8080",
    ).split(",")
    if origin.strip()
]
