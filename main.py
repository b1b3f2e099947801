import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.check_in_routes import router as check_in_router
from api.site_routes import router as site_router
from core import config

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logging.getLogger("google").setLevel(logging.WARNING)
logging.getLogger("urllib3").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# This file is the control center of the whole application

# Construct the list of allowed origins
allowed_origins_list = [
    config.DEV_DOMAIN,
    config.PRODUCTION_DOMAIN,
    "http://localhost:3000",
    "http://127.0.0.1:5173",
]

# Remove any None values and duplicates
allowed_origins_list = list(set([origin for origin in allowed_origins_list if origin]))

logger.info("CORS: Allowing origins: %s", allowed_origins_list)

# Starts Fast API Up; Init
app = FastAPI(title="Geofenced QR Check-In")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Connects Routes to main app
app.include_router(check_in_router, prefix="/attendance", tags=["Attendance"])
app.include_router(site_router, prefix="/sites", tags=["Sites", "Geofence"])


@app.get("/health")
def health():
    return {"status": "ok"}
