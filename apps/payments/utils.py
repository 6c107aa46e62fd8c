import logging

logger = logging.getLogger(__name__)


def log_payment_event(event_type: str, payment_id, **kwargs):
    """
    Log a payment-related event.

    Args:
        event_type: Type of event
        payment_id: Payment ID
        **kwargs: Additional event data
    """
    logger.info(
        f"Payment event: {event_type} for payment {payment_id}",
        extra={"event_type": event_type, "payment_id": str(payment_id), **kwargs}
    )
