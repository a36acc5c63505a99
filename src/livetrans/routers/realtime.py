# routers/realtime.py
"""
REST routes for browser-held realtime sessions.

- POST /api/realtime/token   - ephemeral client secret for the chosen language
- POST /api/realtime/session - SDP offer/answer exchange through the server
"""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from livetrans.realtime.credentials import RealtimeAPIError, RealtimeCredentials
from livetrans.realtime.languages import normalize_language

router = APIRouter()


def get_credentials(request: Request) -> RealtimeCredentials:
    return request.app.state.realtime_credentials


@router.post("/token")
async def create_token(
    request: Request,
    credentials: RealtimeCredentials = Depends(get_credentials),
):
    """
    Create an ephemeral client secret.

    Body (optional JSON): {"api_key": str, "language": str}
    The key falls back to OPENAI_API_KEY on the server.
    """
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    body_key = body.get("api_key")
    api_key = (body_key.strip() if isinstance(body_key, str) else "") or os.getenv("OPENAI_API_KEY")
    language = normalize_language(body.get("language"))

    if not api_key:
        return JSONResponse(
            {
                "error": "No API key. Provide an OpenAI API key, "
                "or set OPENAI_API_KEY on the server."
            },
            status_code=400,
        )

    try:
        value = await credentials.create_client_secret(api_key, language)
    except RealtimeAPIError as e:
        return JSONResponse(e.to_dict(), status_code=e.status_code)

    print(f"🔑 Client secret issued (language={language})")
    return {"value": value}


@router.post("/session")
async def create_session(
    request: Request,
    credentials: RealtimeCredentials = Depends(get_credentials),
):
    """
    Forward an SDP offer to the Realtime API and return the answer.

    Accepts application/sdp or text/plain bodies, or JSON {"sdp": str}.
    """
    api_key = os.getenv("OPENAI_API_KEY")
    if not api_key:
        return JSONResponse({"error": "OPENAI_API_KEY not configured"}, status_code=500)

    content_type = request.headers.get("content-type", "")
    if "application/sdp" in content_type or "text/plain" in content_type:
        sdp = (await request.body()).decode("utf-8", errors="replace")
    else:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse(
                {"error": "Send SDP as application/sdp, text/plain, or JSON with sdp field"},
                status_code=400,
            )
        sdp = body.get("sdp") if isinstance(body, dict) else None

    if not sdp or not isinstance(sdp, str):
        return JSONResponse({"error": "Missing sdp in request body"}, status_code=400)

    try:
        answer = await credentials.create_call(api_key, sdp)
    except RealtimeAPIError as e:
        return JSONResponse(e.to_dict(), status_code=e.status_code)

    return {"sdp": answer}
