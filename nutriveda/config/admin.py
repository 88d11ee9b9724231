"""
Configuration Admin Endpoints

GET reads the active configuration (creating defaults on first read).
PATCH applies a partial update and requires the admin key.

Version: config_service_v1
"""

import logging
from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from nutriveda.errors import NutrivedaException
from nutriveda.runtime import Runtime
from nutriveda.shared.http import to_http_exception, verify_admin_key

from .models import SystemConfig

logger = logging.getLogger(__name__)


router = APIRouter(
    prefix="/api/v1/config",
    tags=["config"],
)


class ConfigResponse(BaseModel):
    success: bool = True
    config: SystemConfig
    retrieved_at: datetime = Field(default_factory=datetime.utcnow)


class ConfigPatchRequest(BaseModel):
    """Nested partial update, e.g. {"patch": {"rule_weights": {"tcm": 0.5}}}."""
    patch: Dict[str, Any]


@router.get("/health")
async def config_health():
    """Does not require authentication."""
    runtime = Runtime.get_instance()
    return {
        "status": "ok",
        "module": "config_service",
        "version": "config_service_v1",
        "config_key": runtime.config.config_key,
        "timestamp": datetime.utcnow().isoformat(),
    }


@router.get("", response_model=ConfigResponse)
async def get_config():
    config = await Runtime.get_instance().config.get_config()
    return ConfigResponse(config=config)


@router.patch("", response_model=ConfigResponse)
async def update_config(request: ConfigPatchRequest, admin_key: str = Depends(verify_admin_key)):
    """Requires X-Admin-API-Key when ADMIN_API_KEY is set."""
    try:
        config = await Runtime.get_instance().config.update_config(request.patch)
    except NutrivedaException as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Config update could not be persisted: {e}")
        raise HTTPException(status_code=503, detail="Configuration store unavailable")
    return ConfigResponse(config=config)
