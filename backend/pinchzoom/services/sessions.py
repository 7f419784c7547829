"""
In-memory registry of zoom sessions served over the API.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from pinchzoom.config import settings
from pinchzoom.services.controller import ZoomController
from pinchzoom.services.layout import ScaleType
from pinchzoom.services.options import ZoomOptions

logger = logging.getLogger(__name__)


@dataclass
class ZoomSession:
    """A controller plus its bookkeeping."""
    session_id: str
    controller: ZoomController
    created_at: datetime
    expires_at: datetime
    # Serializes calls into the controller from the route threadpool
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def touch(self, ttl: timedelta) -> None:
        self.expires_at = datetime.now(timezone.utc) + ttl


class SessionRegistry:
    """Creates, looks up and expires sessions."""

    def __init__(
        self,
        ttl_hours: Optional[float] = None,
        max_sessions: Optional[int] = None,
    ):
        self.ttl = timedelta(hours=ttl_hours if ttl_hours is not None else settings.session_ttl_hours)
        self.max_sessions = max_sessions or settings.max_sessions
        self._sessions: Dict[str, ZoomSession] = {}
        self._lock = threading.Lock()

    def create_session(
        self,
        viewport_width: float,
        viewport_height: float,
        image_width: Optional[float] = None,
        image_height: Optional[float] = None,
        scale_type: ScaleType = ScaleType.FIT_CENTER,
        options: Optional[ZoomOptions] = None,
    ) -> ZoomSession:
        """
        Create a laid-out controller session.

        Raises:
            InvalidConfiguration: If `options` has an invalid scale range
        """
        controller = ZoomController(options=options, scale_type=scale_type)
        controller.set_viewport(viewport_width, viewport_height)
        controller.set_image(image_width, image_height)

        now = datetime.now(timezone.utc)
        session = ZoomSession(
            session_id=str(uuid.uuid4()),
            controller=controller,
            created_at=now,
            expires_at=now + self.ttl,
        )

        with self._lock:
            self._purge_expired_locked()
            if len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions.values(), key=lambda s: s.created_at)
                logger.warning(f"Session limit reached, evicting {oldest.session_id}")
                del self._sessions[oldest.session_id]
            self._sessions[session.session_id] = session

        logger.info(
            f"Created session {session.session_id} "
            f"({viewport_width}x{viewport_height}, {scale_type.value})"
        )
        return session

    def get_session(self, session_id: str) -> Optional[ZoomSession]:
        """Look up a live session and extend its lifetime. None if missing or expired."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if datetime.now(timezone.utc) > session.expires_at:
                logger.warning(f"Session {session_id} has expired")
                del self._sessions[session_id]
                return None
            session.touch(self.ttl)
            return session

    def delete_session(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info(f"Deleted session {session_id}")
        return removed

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired_locked()

    def _purge_expired_locked(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [sid for sid, s in self._sessions.items() if now > s.expires_at]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info(f"Purged {len(expired)} expired session(s)")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


# Global registry instance
session_registry = SessionRegistry()
