"""
NutriVeda API Server Entry Point

Use this file for deployment:
  uvicorn main:app --host 0.0.0.0 --port $PORT
"""

import logging
import os
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nutriveda import __version__
from nutriveda.config.admin import router as config_router
from nutriveda.nutrition.admin import router as nutrition_router
from nutriveda.recommendation.admin import router as recommendation_router
from nutriveda.runtime import Runtime
from nutriveda.scoring.admin import router as scoring_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ============================================
# App Configuration
# ============================================
app = FastAPI(
    title="NutriVeda API",
    description="Multi-system food and recipe recommendations",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(config_router)
app.include_router(nutrition_router)
app.include_router(scoring_router)
app.include_router(recommendation_router)


@app.on_event("startup")
async def startup():
    await Runtime.get_instance().startup()
    logger.info(f"NutriVeda API v{__version__} started")


@app.on_event("shutdown")
async def shutdown():
    await Runtime.get_instance().shutdown()


@app.get("/health")
def health():
    return {
        "status": "ok",
        "service": "nutriveda",
        "version": __version__,
        "timestamp": datetime.utcnow().isoformat(),
    }


# For local development
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
