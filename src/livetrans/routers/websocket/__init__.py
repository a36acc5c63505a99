# routers/websocket/__init__.py
"""
WebSocket router module for live translation streaming.

- /ws/translate - Relay to the OpenAI Realtime API with server-side reconciliation
"""

from fastapi import APIRouter

from .translate import router as translate_router

router = APIRouter()
router.include_router(translate_router)

__all__ = ["router"]
