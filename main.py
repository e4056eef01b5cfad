"""
FastAPI app wiring:
- Loads settings (Unsplash access key, timeouts, font, CORS origin) from env
- Keeps per-UI-session generation state in an in-memory store
- Provides PromoGeneratorService via Depends for endpoints
"""

"""
ARCHITECTURE NOTE TO MYSELF:

Request flow:
- /session/create returns a user_session_id the frontend keeps for the workflow
- /promo/generate: text -> keyword_translator -> image_resolver -> image URL
- /promo/export: compositor re-downloads that URL, draws the caption and
  returns a PNG download (promo-image-with-text.png)

Failure policy:
- ImageResolver never raises; every search failure becomes a placeholder URL,
  so a run ends in "done" even without an API key
- Export failures degrade to the plain background (promo-image-background.png)
  plus an X-Export-Notice header, never a 5xx
- Service exceptions are converted to HTTPException here, at the endpoint layer
"""
# stdlib imports
import logging

# third-party imports
from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse, Response
import uvicorn

# local imports
from compositor import Compositor
from image_resolver import ImageResolver
from logging_utils import configure_logging
from models import AspectRatio, AspectRatioOption, ExportArtifact, ExportRequest, GenerationState, KeywordSet, PromoRequest
from services import ExportNotReadyError, PromoGeneratorService
from session_store import GenerationInProgressError, SessionNotFoundError, SessionStore, get_session_store
from settings import Settings, get_settings
from utils import content_disposition, header_safe


# 1) settings + logging
settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


# 2) App creation
app = FastAPI(title="Promo Image Generator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_origin],  # Frontend URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    # Browsers hide custom headers from JS unless exposed
    expose_headers=["Content-Disposition", "X-Export-Notice"],
)


# 3) Dependency and Service functions
def get_service(
    settings: Settings = Depends(get_settings),
    store: SessionStore = Depends(get_session_store),
) -> PromoGeneratorService:
    """
    Create PromoGeneratorService bound to the shared session store.

    Resolver and compositor are cheap to build, so each request gets fresh
    ones configured from the cached settings.
    """
    resolver = ImageResolver(
        access_key=settings.unsplash_access_key,
        timeout=settings.request_timeout_seconds,
    )
    compositor = Compositor(
        font_path=settings.font_path,
        timeout=settings.request_timeout_seconds,
    )
    return PromoGeneratorService(store=store, resolver=resolver, compositor=compositor)


def _artifact_response(artifact: ExportArtifact) -> Response:
    """
    Turn an ExportArtifact into a download response.

    - composited: PNG attachment
    - fallback with bytes: background attachment + X-Export-Notice
    - fallback without bytes: 303 redirect to the raw image + X-Export-Notice
      (303 so the browser downloads it with a GET instead of re-POSTing)
    """
    headers = {}
    if artifact.notice:
        headers["X-Export-Notice"] = header_safe(artifact.notice)

    if artifact.content is None:
        return RedirectResponse(url=artifact.source_url, status_code=303, headers=headers)

    headers["Content-Disposition"] = content_disposition(artifact.filename)
    return Response(content=artifact.content, media_type=artifact.media_type, headers=headers)


@app.on_event("startup")
def on_startup() -> None:
    """
    FastAPI startup event handler.

    Warns once when no Unsplash key is configured (placeholder mode).
    """
    if not settings.unsplash_access_key:
        logger.warning("UNSPLASH_ACCESS_KEY environment variable is not set. Using fallback image.")


if settings.enable_keyword_preview:
    @app.get("/keywords/preview", response_model=KeywordSet)
    def preview_keywords(text: str, service: PromoGeneratorService = Depends(get_service)):
        """
        Debug helper: show the search terms a caption translates to.

        Returns:
            KeywordSet with terms, source and the joined query.
        """
        if not text.strip():
            raise HTTPException(status_code=400, detail="Promo text required.")
        return service.preview_keywords(text)


@app.post("/session/create")
async def create_session(service: PromoGeneratorService = Depends(get_service)):
    """
    Create a UI session.

    Returns:
        {"user_session_id": str}
    """
    return {"user_session_id": service.create_session()}


@app.get("/aspect-ratios", response_model=list[AspectRatioOption])
async def list_aspect_ratios():
    """Supported aspect ratios with their UI labels, in display order."""
    return [AspectRatioOption(value=ratio, label=ratio.label) for ratio in AspectRatio]


@app.post("/promo/generate", response_model=GenerationState)
async def generate_promo_image(
    # Required parameters first
    request: PromoRequest,
    user_session_id: str,
    # Dependency injection last
    service: PromoGeneratorService = Depends(get_service)
):
    """
    Pick a background image for the caption.

    Args:
        request: Caption text (non-empty) and aspect ratio.
        user_session_id: ID returned by /session/create.

    Returns:
        Terminal GenerationState ("done" with an image URL, possibly a placeholder).
    """
    try:
        return await service.generate(user_session_id, request)

    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found. Please create a session first.")

    except GenerationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))


@app.get("/sessions/{user_session_id}/state", response_model=GenerationState | None)
async def get_generation_state(
    user_session_id: str,
    service: PromoGeneratorService = Depends(get_service)
):
    """Current GenerationState of the session (null before the first run or after reset)."""
    try:
        return service.get_state(user_session_id)

    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found.")


@app.post("/sessions/{user_session_id}/reset")
async def reset_session(
    user_session_id: str,
    service: PromoGeneratorService = Depends(get_service)
):
    """
    Discard the session's result so the user can start over.

    A run still in flight is not cancelled; its result is dropped when it lands.
    """
    try:
        service.reset(user_session_id)
        return {"status": "reset"}

    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found.")


# Export handlers are sync: image download + drawing run in FastAPI's threadpool
@app.post("/promo/export")
def export_promo_image(
    user_session_id: str,
    service: PromoGeneratorService = Depends(get_service)
):
    """
    Download the session's image with the caption drawn on it.

    Returns:
        PNG attachment "promo-image-with-text.png", or the background-only
        fallback (see _artifact_response).
    """
    try:
        artifact = service.export(user_session_id)

    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found.")

    except ExportNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _artifact_response(artifact)


@app.post("/export")
def export_image(
    request: ExportRequest,
    service: PromoGeneratorService = Depends(get_service)
):
    """
    Session-less export: draw any caption onto any image URL.

    Args:
        request: {"image_url": str, "caption": str}

    Returns:
        Same responses as /promo/export.
    """
    artifact = service.export_image(request.image_url, request.caption)
    return _artifact_response(artifact)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=5001,
        reload=True,  # Only for development
        log_level="info"
    )
