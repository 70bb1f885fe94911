from __future__ import annotations
import time
from fastapi import APIRouter

from travelflow.shared.config.settings import settings

router = APIRouter(tags=["health"])

@router.get("/health")
def health():
    upstream_ready = bool(settings.COZE_API_KEY and settings.COZE_WORKFLOW_ID and settings.COZE_API_ENDPOINT)
    return {"ok": True, "upstream_configured": upstream_ready, "ts": time.time()}
