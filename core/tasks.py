from celery import shared_task
import logging

logger = logging.getLogger("audit")


@shared_task(ignore_result=True)
def record_audit_event(event, actor_id=None, org_id=None, detail=""):
    """
    Celery task that writes a lifecycle or messaging event to the audit log.
    Usage:
        record_audit_event.delay("join_request_accepted", actor.id, org.id, "Owner accepted ...")
    """
    logger.info(
        "audit:%s actor=%s org=%s detail=%s",
        event, actor_id, org_id, detail,
        extra={"event": event, "actor": actor_id, "org": org_id},
    )
    return event
