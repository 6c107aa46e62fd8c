import json
import logging

import stripe
from django.conf import settings

logger = logging.getLogger(__name__)


class PaymentProviderError(Exception):
    """A Stripe call failed. ``user_error`` marks failures caused by the request itself."""

    def __init__(self, message, user_error=False):
        super().__init__(message)
        self.message = message
        self.user_error = user_error


class WebhookVerificationError(PaymentProviderError):
    pass


class StripeService:
    """
    Thin gateway over the Stripe API.

    Every call returns plain dicts so callers never depend on Stripe's object
    types, and every Stripe error is re-raised as PaymentProviderError.
    """

    def __init__(self, api_key, webhook_secret, currency='usd', timeout=30, max_retries=2, client=None):
        self.webhook_secret = webhook_secret
        self.currency = currency
        self.client = client or stripe.StripeClient(
            api_key,
            http_client=stripe.RequestsClient(timeout=timeout),
            max_network_retries=max_retries,
        )

    @staticmethod
    def _raise(exc, action):
        logger.error(f"Stripe {action} failed: {exc}")
        user_error = isinstance(exc, (stripe.CardError, stripe.InvalidRequestError))
        message = getattr(exc, 'user_message', None) or str(exc)
        raise PaymentProviderError(message, user_error=user_error) from exc

    def create_payment_intent(self, amount, metadata, receipt_email=None):
        """
        Create a payment intent.

        Args:
            amount: Amount in minor currency units (cents)
            metadata: Correlation data echoed back in webhooks
            receipt_email: Address Stripe sends the receipt to

        Returns:
            Dictionary with the intent id, client secret and amount
        """
        params = {
            'amount': amount,
            'currency': self.currency,
            'metadata': metadata,
            'automatic_payment_methods': {'enabled': True},
        }
        if receipt_email:
            params['receipt_email'] = receipt_email

        try:
            intent = self.client.payment_intents.create(params)
        except stripe.StripeError as exc:
            self._raise(exc, 'payment intent creation')

        return {
            'id': intent.id,
            'client_secret': intent.client_secret,
            'amount': intent.amount,
        }

    def create_checkout_session(self, line_item, metadata, customer_email, success_url, cancel_url):
        """
        Create a hosted checkout session.

        The metadata is attached to the session and to the payment intent it
        spawns, so either webhook object can be traced back to the booking.
        """
        params = {
            'payment_method_types': ['card'],
            'mode': 'payment',
            'customer_email': customer_email,
            'line_items': [{
                'price_data': {
                    'currency': self.currency,
                    'product_data': line_item['product_data'],
                    'unit_amount': line_item['unit_amount'],
                },
                'quantity': 1,
            }],
            'metadata': metadata,
            'payment_intent_data': {'metadata': metadata},
            'success_url': success_url,
            'cancel_url': cancel_url,
        }

        try:
            session = self.client.checkout.sessions.create(params)
        except stripe.StripeError as exc:
            self._raise(exc, 'checkout session creation')

        return {'id': session.id, 'url': session.url}

    def retrieve_payment_intent(self, payment_intent_id):
        try:
            intent = self.client.payment_intents.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            self._raise(exc, 'payment intent lookup')

        metadata = intent.metadata or {}
        return {
            'id': intent.id,
            'status': intent.status,
            'payment_method_types': list(intent.payment_method_types or []),
            'metadata': {key: metadata.get(key) for key in ('booking_id', 'user_id', 'listing_id')},
        }

    def create_refund(self, payment_intent_id, reason='requested_by_customer'):
        try:
            refund = self.client.refunds.create({
                'payment_intent': payment_intent_id,
                'reason': reason,
            })
        except stripe.StripeError as exc:
            self._raise(exc, 'refund')

        return {'id': refund.id, 'status': refund.status}

    def construct_event(self, payload, signature):
        """
        Verify a webhook signature and decode the event.

        The signature is checked against the raw body before any JSON parsing.
        """
        if isinstance(payload, bytes):
            try:
                payload = payload.decode('utf-8')
            except UnicodeDecodeError as exc:
                raise WebhookVerificationError(f"Invalid payload: {exc}") from exc
        if not signature:
            raise WebhookVerificationError('No signatures found matching the expected signature for payload')

        try:
            stripe.WebhookSignature.verify_header(
                payload, signature, self.webhook_secret, tolerance=stripe.Webhook.DEFAULT_TOLERANCE
            )
        except stripe.SignatureVerificationError as exc:
            raise WebhookVerificationError(str(exc)) from exc

        try:
            event = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise WebhookVerificationError(f"Invalid payload: {exc}") from exc
        if not isinstance(event, dict):
            raise WebhookVerificationError('Invalid payload: expected a JSON object')
        return event


_stripe_service = None


def get_stripe_service():
    """Process-wide Stripe gateway built from settings on first use."""
    global _stripe_service
    if _stripe_service is None:
        _stripe_service = StripeService(
            api_key=settings.STRIPE_SECRET_KEY,
            webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
            currency=settings.PAYMENT_CURRENCY,
            timeout=settings.STRIPE_TIMEOUT,
            max_retries=settings.STRIPE_MAX_RETRIES,
        )
        logger.info("Stripe service configured")
    return _stripe_service
