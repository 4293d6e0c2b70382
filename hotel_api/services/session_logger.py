import logging
from typing import Optional

from pymongo.errors import PyMongoError

from ..context import AppContext
from ..db import VISITOR_SESSIONS
from ..errors import InternalError
from ..repositories.session_repo import VisitorSessionsRepo
from ..telemetry import inc, session_events
from ..utils.schemas import SessionEvent

log = logging.getLogger(__name__)


def log_session_event(
    ctx: AppContext,
    event: SessionEvent,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
) -> str:
    repo = VisitorSessionsRepo(ctx.store.collection(VISITOR_SESSIONS))
    try:
        event_id = repo.append(event.to_document(user_agent, ip))
    except PyMongoError as e:
        log.error("Error logging session event: %s", e)
        raise InternalError(str(e)) from e
    inc(session_events, ctx.settings.obs_on)
    return event_id
