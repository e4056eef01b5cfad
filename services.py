# stdlib imports
import logging
from collections.abc import Callable

# local imports
from compositor import Compositor
from image_resolver import ImageResolver
from keyword_translator import translate
from logging_utils import log_session
from models import ExportArtifact, GenerationState, KeywordSet, PromoRequest
from session_store import SessionStore


logger = logging.getLogger(__name__)


class ExportNotReadyError(ValueError):
    """Raised when a session asks for a download before its image is done."""


class PromoGeneratorService:
    """
    Service layer for the promo image workflow.

    Wires the keyword translator, the image resolver and the compositor
    together and keeps each UI session's GenerationState up to date.
    """

    def __init__(
        self,
        store: SessionStore,
        resolver: ImageResolver,
        compositor: Compositor,
        translator: Callable[[str], KeywordSet] = translate,
    ):
        """
        Args:
            store: In-memory session state holder.
            resolver: Finds the background image (never raises).
            compositor: Renders caption + image into the download.
            translator: Text -> KeywordSet function (defaults to keyword_translator.translate).
        """
        self.store = store
        self.resolver = resolver
        self.compositor = compositor
        self.translator = translator


    def create_session(self) -> str:
        user_session_id = self.store.create()
        log_session("session created", user_session_id, __name__)
        return user_session_id


    def preview_keywords(self, text: str) -> KeywordSet:
        """Return the search terms that would be used for text."""
        return self.translator(text)


    async def generate(self, user_session_id: str, request: PromoRequest) -> GenerationState:
        """
        Run one generation: translate the text, resolve a background image.

        The resolver never raises, so placeholder images still end in "done".
        Only an unexpected failure outside the resolver ends in "error".

        Args:
            user_session_id: ID returned by /session/create.
            request: Caption text and aspect ratio.

        Returns:
            The terminal GenerationState of this run. If the session was reset
            while the run was in flight, the state is returned but not stored.

        Raises:
            SessionNotFoundError: Unknown session.
            GenerationInProgressError: A run is already pending for this session.
        """
        pending = self.store.start(user_session_id, request)
        log_session(f"generation started run_id={pending.run_id}", user_session_id, __name__)

        try:
            keywords = self.translator(request.text)
            result = await self.resolver.resolve(keywords, request.aspect_ratio)
            changes = {"status": "done", "keywords": keywords, "result": result}

        except Exception as e:
            logger.error(f"Promo image generation failed: {str(e)}")
            changes = {"status": "error", "error": str(e)}

        final = self.store.finish(user_session_id, pending.run_id, **changes)
        if final is None:
            log_session(
                f"discarding stale result run_id={pending.run_id}", user_session_id, __name__
            )
            return pending.model_copy(update=changes)

        log_session(f"generation {final.status} run_id={final.run_id}", user_session_id, __name__)
        return final


    def get_state(self, user_session_id: str) -> GenerationState | None:
        return self.store.get(user_session_id)


    def reset(self, user_session_id: str) -> None:
        """Clear the session's result. An in-flight run is not cancelled; its result is dropped."""
        self.store.reset(user_session_id)
        log_session("session reset", user_session_id, __name__)


    def export(self, user_session_id: str) -> ExportArtifact:
        """
        Render the download for the session's finished image.

        Raises:
            SessionNotFoundError: Unknown session.
            ExportNotReadyError: No finished image for this session.
        """
        state = self.store.get(user_session_id)
        if state is None or state.status != "done" or state.result is None:
            raise ExportNotReadyError("No generated image to download for this session.")

        log_session(f"export requested run_id={state.run_id}", user_session_id, __name__)
        return self.compositor.export(state.result.url, state.request.text)


    def export_image(self, image_url: str, caption: str) -> ExportArtifact:
        """Render a download for an arbitrary image URL and caption."""
        return self.compositor.export(image_url, caption)
