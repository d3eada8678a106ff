"""
Customer notification capability.

Order and loyalty services announce events (order confirmation, delivery,
return updates, tier upgrades) through a Notifier. The concrete class is
chosen with settings.NOTIFIER_CLASS so that an email/WhatsApp gateway can be
plugged in without touching the services. Delivery is fire-and-forget: a
failing notifier is logged and never fails the request that triggered it.
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)

ORDER_CONFIRMATION = 'order_confirmation'
ORDER_DELIVERED = 'order_delivered'
COD_COLLECTED = 'cod_collected'
RETURN_REQUESTED = 'return_requested'
RETURN_UPDATE = 'return_update'
TIER_UPGRADE = 'tier_upgrade'


class Notifier:
    """Interface for notification channels"""

    channels = ('email',)

    def send(self, user, event, message, metadata=None):
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Writes notifications to the log instead of an external gateway"""

    channels = ('email', 'whatsapp')

    def send(self, user, event, message, metadata=None):
        recipient = getattr(user, 'email', None) or getattr(user, 'phone', None) or 'unknown'
        for channel in self.channels:
            logger.info(f"[{channel}] {event} -> {recipient}: {message}")
        return [{'channel': channel, 'success': True} for channel in self.channels]


def get_notifier():
    """Instantiate the configured notifier class"""
    return import_string(settings.NOTIFIER_CLASS)()


def notify(user, event, message, notifier=None, **metadata):
    """
    Send a notification without letting failures escape.

    Returns True when the notifier accepted the message.
    """
    if user is None:
        return False
    try:
        (notifier or get_notifier()).send(user, event, message, metadata)
        return True
    except Exception:
        logger.exception(f"Notification '{event}' for user {getattr(user, 'pk', None)} failed")
        return False
