"""QR Object Tracker — FastAPI backend."""
import logging

from fastapi import FastAPI

# Show simulator, registry and scan events (INFO level)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logging.getLogger("tracker_core").setLevel(logging.INFO)
from fastapi.middleware.cors import CORSMiddleware

import app_state
from api.objects import router as objects_router
from api.routes import router
from api.scans import router as scans_router
from utils.config import CORS_ORIGINS

app = FastAPI(
    title="QR Object Tracker",
    description="Registers objects with QR payloads, simulates GPS movement and correlates scans",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(objects_router, prefix="/api")
app.include_router(scans_router, prefix="/api")


@app.on_event("startup")
async def startup() -> None:
    """Start the location simulator tick loop."""
    app_state.simulator.start()


@app.on_event("shutdown")
async def shutdown() -> None:
    """Cancel the tick loop so no tick fires after shutdown."""
    app_state.simulator.stop()


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "qr-object-tracker", "docs": "/docs", "health": "/api/health"}


if __name__ == "__main__":
    import uvicorn

    from utils.config import PORT

    uvicorn.run(app, host="0.0.0.0", port=PORT)
