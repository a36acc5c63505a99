# realtime/credentials.py
"""
Short-lived credential and SDP exchange with the OpenAI Realtime REST API.

Browser clients never see the real API key: they get an ephemeral client
secret from /realtime/client_secrets, or post their SDP offer through this
server to /realtime/calls.
"""

import json
import os

import httpx

from .languages import build_session_config

DEFAULT_BASE_URL = "https://api.openai.com/v1"
REQUEST_TIMEOUT = 15.0
CLIENT_SECRET_TTL = 3600


class RealtimeAPIError(Exception):
    """Upstream call failed; carries the status and body to relay to the client."""

    def __init__(self, status_code: int, message: str, payload: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.payload = payload

    def to_dict(self) -> dict:
        return self.payload if self.payload is not None else {"error": self.message}


def _error_payload(response: httpx.Response) -> dict | None:
    try:
        data = response.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else None


class RealtimeCredentials:
    """Async client for client_secrets and calls."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        model: str | None = None,
        transcription_model: str | None = None,
        target_language: str | None = None,
    ):
        self.base_url = (base_url or os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.model = model or os.getenv("OPENAI_REALTIME_MODEL", "gpt-realtime")
        self.transcription_model = transcription_model or os.getenv(
            "OPENAI_TRANSCRIBE_MODEL", "gpt-4o-transcribe"
        )
        self.target_language = target_language or os.getenv(
            "TRANSLATION_TARGET_LANGUAGE", "English"
        )
        self._client = httpx.AsyncClient(timeout=timeout)

    def session_config(self, language: str) -> dict:
        return build_session_config(
            language,
            target_language=self.target_language,
            model=self.model,
            transcription_model=self.transcription_model,
        )

    async def create_client_secret(self, api_key: str, language: str) -> str:
        """
        Mint an ephemeral client secret for a browser session.

        Args:
            api_key: OpenAI API key
            language: Source language code

        Returns:
            The ephemeral key value

        Raises:
            RealtimeAPIError: On upstream error, timeout or missing value
        """
        body = {
            "expires_after": {"anchor": "created_at", "seconds": CLIENT_SECRET_TTL},
            "session": self.session_config(language),
        }

        try:
            response = await self._client.post(
                f"{self.base_url}/realtime/client_secrets",
                headers={"Authorization": f"Bearer {api_key}"},
                json=body,
            )
        except httpx.TimeoutException:
            raise RealtimeAPIError(500, "Token request timed out")
        except httpx.HTTPError as e:
            print(f"❌ OpenAI client_secrets error: {type(e).__name__}: {e}")
            raise RealtimeAPIError(500, "Failed to create token")

        if response.is_error:
            raise RealtimeAPIError(
                response.status_code,
                response.text or "OpenAI API error",
                _error_payload(response),
            )

        data = _error_payload(response) or {}
        value = data.get("value")
        if not value:
            raise RealtimeAPIError(500, "No token returned")
        return value

    async def create_call(self, api_key: str, sdp: str) -> str:
        """
        Exchange an SDP offer for the answer SDP.

        Args:
            api_key: OpenAI API key
            sdp: Client SDP offer

        Returns:
            Answer SDP text

        Raises:
            RealtimeAPIError: On upstream error or timeout
        """
        session = json.dumps({"type": "realtime", "model": self.model})

        try:
            response = await self._client.post(
                f"{self.base_url}/realtime/calls",
                headers={"Authorization": f"Bearer {api_key}"},
                files={"sdp": (None, sdp), "session": (None, session)},
            )
        except httpx.TimeoutException:
            raise RealtimeAPIError(500, "Session request timed out")
        except httpx.HTTPError as e:
            print(f"❌ OpenAI Realtime API error: {type(e).__name__}: {e}")
            raise RealtimeAPIError(500, "Failed to create Realtime session")

        if response.is_error:
            raise RealtimeAPIError(
                response.status_code,
                response.text or "OpenAI API error",
                _error_payload(response),
            )
        return response.text

    async def close(self):
        await self._client.aclose()
