"""
Payment gateway callback verification.

The gateway signs "<order_ref>|<payment_id>" with HMAC-SHA256 using the
webhook secret and sends the hex digest with the callback.
"""
import hashlib
import hmac
import logging

from django.conf import settings

from apps.common.exceptions import PaymentVerificationFailed

logger = logging.getLogger(__name__)


class PaymentVerifier:
    """Check payment callback signatures"""

    def __init__(self, secret=None):
        secret = secret if secret is not None else settings.PAYMENT_WEBHOOK_SECRET
        self._secret = secret.encode()

    def sign(self, order_ref, payment_id):
        message = f"{order_ref}|{payment_id}".encode()
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def is_valid(self, order_ref, payment_id, signature):
        if not payment_id or not signature:
            return False
        return hmac.compare_digest(self.sign(order_ref, payment_id), str(signature))

    def verify(self, order_ref, payload):
        """
        Validate a callback payload for an order.

        Args:
            order_ref: Order.order_ref the payment claims to settle
            payload: dict with payment_id and signature

        Returns:
            dict to store as Order.payment_result

        Raises:
            PaymentVerificationFailed: If the signature does not match
        """
        payment_id = payload.get('payment_id')
        if not self.is_valid(order_ref, payment_id, payload.get('signature')):
            logger.warning(f"Rejected payment callback for order {order_ref}")
            raise PaymentVerificationFailed()

        return {
            'id': payment_id,
            'status': payload.get('status') or 'success',
            'email_address': payload.get('email_address', ''),
        }
