# =============================================================================
# IMPORTS
# =============================================================================
import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q

from apps.bookings.models import Booking, BookingStatus
from apps.core.exceptions import BadRequest, Conflict, Forbidden, InternalError, NotFound
from apps.core.utils import sum_of, to_minor_units
from services.stripe_service import PaymentProviderError, WebhookVerificationError
from .models import Payment, PaymentStatus
from .utils import log_payment_event

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment lifecycle on top of a Stripe gateway.

    The gateway is passed in so views use the process-wide client while tests
    substitute a fake one.
    """

    def __init__(self, gateway):
        self.gateway = gateway

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------
    @staticmethod
    def _provider_error(exc):
        if exc.user_error:
            return BadRequest(exc.message)
        return InternalError(f"Payment provider error: {exc.message}")

    @staticmethod
    def _metadata(booking, user):
        return {
            'booking_id': str(booking.id),
            'user_id': str(user.id),
            'listing_id': str(booking.listing_id),
        }

    @staticmethod
    def _payable_booking(booking_id, user):
        booking = Booking.objects.select_related('listing', 'guide').filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.tourist_id != user.id:
            raise Forbidden("You can only pay for your own bookings")
        if booking.status != BookingStatus.CONFIRMED:
            raise BadRequest("Booking must be confirmed before payment")
        if Payment.objects.paid().filter(booking=booking).exists():
            raise Conflict("This booking has already been paid")
        return booking

    @staticmethod
    @transaction.atomic
    def _upsert_pending(booking, user, **provider_ids):
        """Create or reset the booking's payment row to Pending."""
        payment = Payment.objects.select_for_update().filter(booking=booking).first()
        if payment is not None and payment.is_paid:
            raise Conflict("This booking has already been paid")
        if payment is None:
            payment = Payment(booking=booking)

        payment.user = user
        payment.amount = booking.total_amount
        payment.currency = settings.PAYMENT_CURRENCY
        payment.status = PaymentStatus.PENDING
        for field, value in provider_ids.items():
            setattr(payment, field, value)
        payment.save()
        return payment

    @staticmethod
    def apply_success(booking_id, payment_intent_id=None, payment_method=None, session_id=None,
                      from_webhook=False):
        """
        Idempotently move a booking's payment to Paid.

        Returns ``(payment, applied)``; ``payment`` is None when no payment row
        exists for the booking.
        """
        with transaction.atomic():
            payment = Payment.objects.select_for_update().filter(booking_id=booking_id).first()
            if payment is None:
                return None, False
            applied = payment.mark_paid(
                payment_intent_id=payment_intent_id,
                payment_method=payment_method,
                session_id=session_id,
                from_webhook=from_webhook,
            )

        log_payment_event(
            'paid' if applied else 'paid_ignored', payment.id,
            booking_id=str(booking_id), status=payment.status,
        )
        return payment, applied

    # -------------------------------------------------------------------------
    # Initiation
    # -------------------------------------------------------------------------
    def create_payment_intent(self, booking_id, user):
        booking = self._payable_booking(booking_id, user)
        amount = to_minor_units(booking.total_amount)

        try:
            intent = self.gateway.create_payment_intent(
                amount=amount,
                metadata=self._metadata(booking, user),
                receipt_email=user.email,
            )
        except PaymentProviderError as exc:
            raise self._provider_error(exc)

        payment = self._upsert_pending(booking, user, stripe_payment_id=intent['id'])
        log_payment_event('intent_created', payment.id, booking_id=str(booking.id), amount=amount)
        return {
            'client_secret': intent['client_secret'],
            'payment_intent_id': intent['id'],
            'amount': amount,
            'payment': payment,
        }

    def create_checkout_session(self, booking_id, user):
        booking = self._payable_booking(booking_id, user)
        listing = booking.listing

        product_data = {
            'name': listing.title,
            'description': f"Tour with {booking.guide.name} on {booking.booking_date.isoformat()}",
        }
        if listing.images:
            product_data['images'] = [listing.images[0]]

        booking_url = f"{settings.FRONTEND_URL}/dashboard/bookings/{booking.id}"
        try:
            session = self.gateway.create_checkout_session(
                line_item={
                    'product_data': product_data,
                    'unit_amount': to_minor_units(booking.total_amount),
                },
                metadata=self._metadata(booking, user),
                customer_email=user.email,
                success_url=f"{booking_url}?payment=success",
                cancel_url=f"{booking_url}?payment=cancelled",
            )
        except PaymentProviderError as exc:
            raise self._provider_error(exc)

        payment = self._upsert_pending(booking, user, stripe_session_id=session['id'])
        log_payment_event('checkout_created', payment.id, booking_id=str(booking.id))
        return {'session_id': session['id'], 'url': session['url']}

    # -------------------------------------------------------------------------
    # Confirmation
    # -------------------------------------------------------------------------
    def confirm_payment(self, booking_id, payment_intent_id, user):
        """Re-check an intent with Stripe and mark the payment Paid when it succeeded."""
        booking = Booking.objects.filter(pk=booking_id).first()
        if booking is None:
            raise NotFound("Booking not found")
        if booking.tourist_id != user.id:
            raise Forbidden("You can only pay for your own bookings")

        try:
            intent = self.gateway.retrieve_payment_intent(payment_intent_id)
        except PaymentProviderError as exc:
            raise self._provider_error(exc)

        if intent['status'] != 'succeeded':
            raise BadRequest("Payment has not been completed")

        intent_booking = intent.get('metadata', {}).get('booking_id')
        if intent_booking and intent_booking != str(booking.id):
            raise BadRequest("Payment intent does not belong to this booking")

        methods = intent.get('payment_method_types') or []
        payment, _ = self.apply_success(
            booking.id,
            payment_intent_id=intent['id'],
            payment_method=methods[0] if methods else None,
        )
        if payment is None:
            raise NotFound("Payment not found")
        return payment

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------
    def handle_webhook(self, payload, signature):
        """Verify and apply a Stripe event. Unknown event types are ignored."""
        try:
            event = self.gateway.construct_event(payload, signature)
        except WebhookVerificationError as exc:
            logger.warning(f"Rejected webhook: {exc.message}")
            raise BadRequest(f"Webhook Error: {exc.message}")

        event_type = event.get('type')
        data = (event.get('data') or {}).get('object') or {}
        handlers = {
            'payment_intent.succeeded': self._on_intent_succeeded,
            'payment_intent.payment_failed': self._on_intent_failed,
            'checkout.session.completed': self._on_checkout_completed,
        }

        handler = handlers.get(event_type)
        if handler is None:
            logger.info(f"Received unhandled webhook event: {event_type}")
            return

        booking_id = (data.get('metadata') or {}).get('booking_id')
        if not booking_id:
            logger.warning(f"Dropping {event_type} event {event.get('id')} without booking_id metadata")
            return

        handler(booking_id, data)

    def _on_intent_succeeded(self, booking_id, intent):
        methods = intent.get('payment_method_types') or []
        payment, _ = self.apply_success(
            booking_id,
            payment_intent_id=intent.get('id'),
            payment_method=methods[0] if methods else None,
            from_webhook=True,
        )
        if payment is None:
            raise NotFound("Payment not found")

    def _on_checkout_completed(self, booking_id, session):
        if session.get('payment_status') not in (None, 'paid'):
            logger.info(f"Checkout session {session.get('id')} completed without payment")
            return
        payment, _ = self.apply_success(
            booking_id,
            payment_intent_id=session.get('payment_intent'),
            payment_method='card',
            session_id=session.get('id'),
            from_webhook=True,
        )
        if payment is None:
            raise NotFound("Payment not found")

    def _on_intent_failed(self, booking_id, intent):
        reason = (intent.get('last_payment_error') or {}).get('message', '')
        with transaction.atomic():
            payment = Payment.objects.select_for_update().filter(booking_id=booking_id).first()
            if payment is None:
                raise NotFound("Payment not found")
            payment.mark_failed(reason, from_webhook=True)
        log_payment_event('failed', payment.id, booking_id=str(booking_id), reason=reason)

    # -------------------------------------------------------------------------
    # Refunds
    # -------------------------------------------------------------------------
    def refund(self, payment_id, reason=""):
        """
        Refund a paid payment with Stripe, then cancel its booking.

        A refund cancels the booking whatever its status, Completed included.
        Payments recorded without a Stripe intent skip the provider call.
        The payment and booking updates share one transaction.
        """
        payment = Payment.objects.select_related('booking').filter(pk=payment_id).first()
        if payment is None:
            raise NotFound("Payment not found")
        if not payment.is_paid:
            raise BadRequest("Can only refund paid payments")

        if payment.stripe_payment_id:
            try:
                self.gateway.create_refund(payment.stripe_payment_id)
            except PaymentProviderError as exc:
                raise BadRequest(f"Stripe refund failed: {exc.message}")
        else:
            logger.warning(f"Payment {payment.id} has no Stripe intent; recording refund locally")

        with transaction.atomic():
            payment = Payment.objects.select_for_update().get(pk=payment.pk)
            if not payment.is_paid:
                raise BadRequest("Can only refund paid payments")
            payment.mark_refunded(reason)

            booking = Booking.objects.select_for_update().get(pk=payment.booking_id)
            booking.cancel_for_refund()

        log_payment_event('refunded', payment.id, booking_id=str(booking.id), reason=reason)
        return payment

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    @staticmethod
    def scoped_queryset(user):
        return Payment.objects.visible_to(user).select_related(
            'booking', 'booking__listing', 'user'
        )

    @staticmethod
    def _check_access(payment, user):
        if user.is_admin or payment.user_id == user.id or payment.booking.guide_id == user.id:
            return payment
        raise Forbidden("You do not have access to this payment")

    @staticmethod
    def get_payment(payment_id, user):
        payment = Payment.objects.select_related('booking', 'booking__listing', 'user').filter(pk=payment_id).first()
        if payment is None:
            raise NotFound("Payment not found")
        return PaymentService._check_access(payment, user)

    @staticmethod
    def get_payment_for_booking(booking_id, user):
        payment = Payment.objects.select_related('booking', 'booking__listing', 'user').filter(
            booking_id=booking_id
        ).first()
        if payment is None:
            raise NotFound("Payment not found")
        return PaymentService._check_access(payment, user)

    @staticmethod
    def stats(user):
        queryset = Payment.objects.visible_to(user)
        stats = queryset.aggregate(
            total=Count('id'),
            paid=Count('id', filter=Q(status=PaymentStatus.PAID)),
            pending=Count('id', filter=Q(status=PaymentStatus.PENDING)),
            refunded=Count('id', filter=Q(status=PaymentStatus.REFUNDED)),
            failed=Count('id', filter=Q(status=PaymentStatus.FAILED)),
        )
        stats['total_revenue'] = sum_of(queryset.filter(status=PaymentStatus.PAID), 'amount')
        return stats
