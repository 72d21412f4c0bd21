import logging
import threading
import time
from typing import Any, Callable, MutableMapping

logger = logging.getLogger(__name__)


DEDUP_WINDOW_SECONDS = 60.0
SESSION_KEY_PREFIX = "pageview_tracked_"


class PageViewGuard:
    """Best-effort suppression of repeated page-view writes for one visitor session.

    A write is skipped when another write is already in flight, or when the same
    page was tracked less than ``window_seconds`` ago. The last tracked page is
    remembered in memory and, per profile, in ``session_storage``; the latter
    outlives the guard itself for as long as the visitor session lasts.
    """

    def __init__(
        self,
        session_storage: MutableMapping[str, str] | None = None,
        window_seconds: float = DEDUP_WINDOW_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.session_storage = session_storage if session_storage is not None else {}
        self.window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self.in_flight = False
        self.last_page_key: str | None = None
        self.last_tracked_at = 0.0

    @staticmethod
    def session_key(profile_id: str) -> str:
        return f"{SESSION_KEY_PREFIX}{profile_id}"

    def _tracked_recently_in_session(self, profile_id: str, now: float) -> bool:
        stored = self.session_storage.get(self.session_key(profile_id))
        if stored is None:
            return False
        try:
            return now - float(stored) < self.window_seconds
        except (TypeError, ValueError):
            return False

    def track(self, profile_id: str, page_key: str, write: Callable[[], Any]) -> bool:
        """Run ``write`` unless the page view is a duplicate. Returns True if it ran."""
        now = self._clock()
        with self._lock:
            if self.in_flight or (
                self.last_page_key == page_key and now - self.last_tracked_at < self.window_seconds
            ):
                logger.info("Skipping duplicate page view page_key=%s", page_key)
                return False
            self.in_flight = True
            self.last_page_key = page_key
            self.last_tracked_at = now

        try:
            if self._tracked_recently_in_session(profile_id, now):
                logger.info("Skipping duplicate page view profile_id=%s (session)", profile_id)
                return False
            write()
            self.session_storage[self.session_key(profile_id)] = str(now)
            return True
        except Exception:
            logger.exception("Page view tracking failed profile_id=%s", profile_id)
            return False
        finally:
            with self._lock:
                self.in_flight = False
