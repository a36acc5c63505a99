from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import os
from dotenv import load_dotenv

load_dotenv()

from livetrans.realtime.credentials import RealtimeCredentials
from livetrans.realtime.languages import SOURCE_LANGUAGES
from livetrans.routers import realtime, websocket


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared realtime HTTP client on startup and close it on shutdown"""
    app.state.realtime_credentials = RealtimeCredentials()
    print("✅ Realtime credentials client ready")

    yield

    print("🔌 Shutting down...")
    await app.state.realtime_credentials.close()


app = FastAPI(
    title="Live Translation",
    description="Live speech transcription and translation over the OpenAI Realtime API",
    version="1.0.0",
    lifespan=lifespan,
)

# Security headers for production only
if os.getenv("ENVIRONMENT") == "production":
    from fastapi.middleware.httpsredirect import HTTPSRedirectMiddleware
    from starlette.middleware.base import BaseHTTPMiddleware

    class SecurityHeadersMiddleware(BaseHTTPMiddleware):
        async def dispatch(self, request, call_next):
            response = await call_next(request)
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["X-Frame-Options"] = "DENY"
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
            response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
            return response

    app.add_middleware(HTTPSRedirectMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

# CORS configuration
origins = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Root endpoint
@app.get("/")
async def root():
    return {
        "message": "Live Translation",
        "version": "1.0.0",
        "docs": "/docs",
        "endpoints": {
            "token": "/api/realtime/token",
            "session": "/api/realtime/session",
            "websocket": "/ws/translate",
            "languages": "/api/languages",
        },
    }


@app.get("/api/languages")
async def languages():
    return [{"code": code, "name": name} for code, name in SOURCE_LANGUAGES.items()]


# Include routers
app.include_router(
    realtime.router,
    prefix="/api/realtime",
    tags=["realtime"],
)

app.include_router(
    websocket.router,
    prefix="/ws",
    tags=["websocket"],
)


# Health check endpoint
@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "Live Translation"}
