import logging
from django.conf import settings
from django.db import transaction

from core.tasks import record_audit_event

logger = logging.getLogger("audit")


def _dispatch(event, actor_id, org_id, detail):
    try:
        record_audit_event.delay(event, actor_id, org_id, detail)
    except Exception:
        # The sink is best-effort; the primary operation has already committed.
        logger.exception(
            "audit:sink_failure event=%s actor=%s org=%s",
            event, actor_id, org_id,
            extra={"event": event, "actor": actor_id, "org": org_id},
        )


def emit(event, actor=None, organization=None, detail=""):
    """Queue a fire-and-forget audit record once the current transaction commits.

    Nothing is returned and no exception escapes: sink failures are logged on the
    ``audit`` logger and never roll back or fail the calling operation.
    """
    if not getattr(settings, "AUDIT_ENABLED", True):
        return
    actor_id = getattr(actor, "id", actor)
    org_id = getattr(organization, "id", organization)
    try:
        transaction.on_commit(lambda: _dispatch(event, actor_id, org_id, detail))
    except Exception:
        logger.exception("audit:schedule_failure event=%s", event)
