from decimal import Decimal
from unittest import mock

import pytest
import stripe

from apps.bookings.models import Booking, BookingStatus
from apps.payments.models import Payment, PaymentStatus
from apps.payments.services import PaymentService

pytestmark = pytest.mark.django_db

WEBHOOK_URL = '/api/payments/webhook'


@pytest.fixture
def pending_payment(confirmed_booking):
    return Payment.objects.create(
        booking=confirmed_booking,
        user=confirmed_booking.tourist,
        amount=confirmed_booking.total_amount,
        stripe_payment_id='pi_test_123',
    )


@pytest.fixture
def paid_payment(pending_payment):
    pending_payment.mark_paid(payment_intent_id='pi_test_123', payment_method='card')
    return pending_payment


def post_webhook(client, payload, signature):
    return client.post(WEBHOOK_URL, data=payload, content_type='application/json', HTTP_STRIPE_SIGNATURE=signature)


def intent_object(booking, **fields):
    data = {
        'id': 'pi_test_123',
        'object': 'payment_intent',
        'metadata': {'booking_id': str(booking.id)},
        'payment_method_types': ['card'],
    }
    data.update(fields)
    return data


# =============================================================================
# INITIATION
# =============================================================================
class TestPaymentIntent:

    def test_creates_intent_and_pending_payment(self, client_for, tourist, confirmed_booking, stripe_gateway, stripe_client):
        response = client_for(tourist).post(
            '/api/payments/create-payment-intent', {'booking_id': str(confirmed_booking.id)}, format='json'
        )

        assert response.status_code == 201
        data = response.json()['data']
        assert data['client_secret'] == 'pi_test_123_secret_abc'
        assert data['payment_intent_id'] == 'pi_test_123'
        assert data['amount'] == 13000
        assert data['payment']['status'] == PaymentStatus.PENDING

        params = stripe_client.payment_intents.create.call_args.args[0]
        assert params['amount'] == 13000
        assert params['currency'] == 'usd'
        assert params['metadata'] == {
            'booking_id': str(confirmed_booking.id),
            'user_id': str(tourist.id),
            'listing_id': str(confirmed_booking.listing_id),
        }

        payment = Payment.objects.get()
        assert payment.amount == Decimal('130.00')
        assert payment.stripe_payment_id == 'pi_test_123'

    def test_retrying_reuses_the_payment_row(self, client_for, tourist, pending_payment, stripe_gateway):
        response = client_for(tourist).post(
            '/api/payments/create-payment-intent', {'booking_id': str(pending_payment.booking_id)}, format='json'
        )

        assert response.status_code == 201
        assert Payment.objects.count() == 1

    def test_booking_must_be_confirmed(self, client_for, tourist, listing, make_booking, stripe_gateway, stripe_client):
        booking = make_booking(listing, tourist)

        response = client_for(tourist).post(
            '/api/payments/create-payment-intent', {'booking_id': str(booking.id)}, format='json'
        )

        assert response.status_code == 400
        assert response.json()['message'] == "Booking must be confirmed before payment"
        stripe_client.payment_intents.create.assert_not_called()

    def test_only_the_booking_tourist_pays(self, client_for, make_user, confirmed_booking, stripe_gateway):
        response = client_for(make_user()).post(
            '/api/payments/create-payment-intent', {'booking_id': str(confirmed_booking.id)}, format='json'
        )

        assert response.status_code == 403
        assert response.json()['message'] == "You can only pay for your own bookings"

    def test_already_paid(self, client_for, tourist, paid_payment, stripe_gateway):
        response = client_for(tourist).post(
            '/api/payments/create-payment-intent', {'booking_id': str(paid_payment.booking_id)}, format='json'
        )

        assert response.status_code == 409
        assert response.json()['message'] == "This booking has already been paid"

    def test_unknown_booking(self, client_for, tourist, stripe_gateway):
        response = client_for(tourist).post(
            '/api/payments/create-payment-intent',
            {'booking_id': '00000000-0000-0000-0000-000000000000'},
            format='json',
        )

        assert response.status_code == 404
        assert response.json()['message'] == "Booking not found"

    def test_card_errors_are_bad_requests(self, client_for, tourist, confirmed_booking, stripe_gateway, stripe_client):
        stripe_client.payment_intents.create.side_effect = stripe.InvalidRequestError('Amount too small', 'amount')

        response = client_for(tourist).post(
            '/api/payments/create-payment-intent', {'booking_id': str(confirmed_booking.id)}, format='json'
        )

        assert response.status_code == 400
        assert not Payment.objects.exists()


class TestCheckoutSession:

    def test_creates_session(self, client_for, tourist, confirmed_booking, stripe_gateway, stripe_client, settings):
        response = client_for(tourist).post(
            '/api/payments/create-checkout-session', {'booking_id': str(confirmed_booking.id)}, format='json'
        )

        assert response.status_code == 201
        assert response.json()['data'] == {
            'session_id': 'cs_test_123',
            'url': 'https://checkout.stripe.com/c/pay/cs_test_123',
        }

        params = stripe_client.checkout.sessions.create.call_args.args[0]
        booking_url = f"{settings.FRONTEND_URL}/dashboard/bookings/{confirmed_booking.id}"
        assert params['success_url'] == f"{booking_url}?payment=success"
        assert params['cancel_url'] == f"{booking_url}?payment=cancelled"
        assert params['metadata'] == params['payment_intent_data']['metadata']
        product = params['line_items'][0]['price_data']['product_data']
        assert product['description'].startswith("Tour with John Guide on ")
        assert product['images'] == ['https://images.example.com/food.jpg']

        assert Payment.objects.get().stripe_session_id == 'cs_test_123'


# =============================================================================
# CONFIRMATION
# =============================================================================
class TestConfirmPayment:

    def confirm(self, client, booking):
        return client.post(
            '/api/payments/confirm',
            {'booking_id': str(booking.id), 'payment_intent_id': 'pi_test_123'},
            format='json',
        )

    def test_marks_payment_paid(self, client_for, tourist, pending_payment, stripe_gateway):
        response = self.confirm(client_for(tourist), pending_payment.booking)

        assert response.status_code == 200
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PAID
        assert pending_payment.payment_method == 'card'
        assert pending_payment.paid_at is not None

    def test_intent_must_have_succeeded(self, client_for, tourist, pending_payment, stripe_gateway, stripe_client):
        stripe_client.payment_intents.retrieve.return_value.status = 'requires_payment_method'

        response = self.confirm(client_for(tourist), pending_payment.booking)

        assert response.status_code == 400
        assert response.json()['message'] == "Payment has not been completed"
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_intent_for_another_booking_is_rejected(self, client_for, tourist, pending_payment, stripe_gateway, stripe_client):
        stripe_client.payment_intents.retrieve.return_value.metadata = {'booking_id': 'another-booking'}

        response = self.confirm(client_for(tourist), pending_payment.booking)

        assert response.status_code == 400
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_without_payment_attempt(self, client_for, tourist, confirmed_booking, stripe_gateway):
        response = self.confirm(client_for(tourist), confirmed_booking)

        assert response.status_code == 404
        assert response.json()['message'] == "Payment not found"

    def test_already_paid_is_left_unchanged(self, client_for, tourist, paid_payment, stripe_gateway):
        paid_at = paid_payment.paid_at

        response = self.confirm(client_for(tourist), paid_payment.booking)

        assert response.status_code == 200
        paid_payment.refresh_from_db()
        assert paid_payment.paid_at == paid_at


# =============================================================================
# WEBHOOKS
# =============================================================================
class TestWebhook:

    def test_success_event_is_applied_once(self, api_client, pending_payment, stripe_gateway, signed_event):
        payload, signature = signed_event('payment_intent.succeeded', intent_object(pending_payment.booking))

        response = post_webhook(api_client, payload, signature)
        assert response.status_code == 200
        assert response.json() == {'received': True}

        pending_payment.refresh_from_db()
        first_paid_at = pending_payment.paid_at
        assert pending_payment.status == PaymentStatus.PAID
        assert pending_payment.webhook_received_at is not None

        response = post_webhook(api_client, payload, signature)
        assert response.status_code == 200

        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PAID
        assert pending_payment.paid_at == first_paid_at
        assert Payment.objects.count() == 1

    def test_invalid_signature_changes_nothing(self, api_client, pending_payment, stripe_gateway, signed_event):
        payload, signature = signed_event(
            'payment_intent.succeeded', intent_object(pending_payment.booking), secret='whsec_wrong'
        )

        response = post_webhook(api_client, payload, signature)

        assert response.status_code == 400
        assert response.json()['message'].startswith("Webhook Error:")
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_non_utf8_body_is_rejected(self, api_client, pending_payment, stripe_gateway, sign_payload):
        response = post_webhook(api_client, b'\xff\xfe{"x":1}', sign_payload('{"x":1}'))

        assert response.status_code == 400
        assert response.json()['message'].startswith("Webhook Error: Invalid payload")
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_signed_body_that_is_not_json(self, api_client, pending_payment, stripe_gateway, sign_payload):
        payload = 'payment_intent.succeeded'

        response = post_webhook(api_client, payload, sign_payload(payload))

        assert response.status_code == 400
        assert response.json()['message'].startswith("Webhook Error: Invalid payload")
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_missing_signature(self, api_client, pending_payment, stripe_gateway, signed_event):
        payload, _ = signed_event('payment_intent.succeeded', intent_object(pending_payment.booking))

        response = post_webhook(api_client, payload, '')

        assert response.status_code == 400

    def test_event_without_booking_is_dropped(self, api_client, pending_payment, stripe_gateway, signed_event):
        payload, signature = signed_event(
            'payment_intent.succeeded', intent_object(pending_payment.booking, metadata={})
        )

        response = post_webhook(api_client, payload, signature)

        assert response.status_code == 200
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PENDING

    def test_failure_event_marks_failed(self, api_client, pending_payment, stripe_gateway, signed_event):
        data = intent_object(pending_payment.booking, last_payment_error={'message': 'Your card was declined.'})
        payload, signature = signed_event('payment_intent.payment_failed', data)

        response = post_webhook(api_client, payload, signature)

        assert response.status_code == 200
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.FAILED
        assert pending_payment.failure_reason == 'Your card was declined.'

    def test_failed_payment_can_still_succeed(self, api_client, pending_payment, stripe_gateway, signed_event):
        pending_payment.mark_failed('declined')
        payload, signature = signed_event('payment_intent.succeeded', intent_object(pending_payment.booking))

        post_webhook(api_client, payload, signature)

        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PAID
        assert pending_payment.failure_reason == ''

    def test_checkout_completed(self, api_client, pending_payment, stripe_gateway, signed_event):
        session = {
            'id': 'cs_test_123',
            'object': 'checkout.session',
            'payment_intent': 'pi_from_session',
            'payment_status': 'paid',
            'metadata': {'booking_id': str(pending_payment.booking_id)},
        }
        payload, signature = signed_event('checkout.session.completed', session)

        response = post_webhook(api_client, payload, signature)

        assert response.status_code == 200
        pending_payment.refresh_from_db()
        assert pending_payment.status == PaymentStatus.PAID
        assert pending_payment.stripe_session_id == 'cs_test_123'
        assert pending_payment.stripe_payment_id == 'pi_from_session'

    def test_refunded_payment_is_not_reopened(self, api_client, paid_payment, stripe_gateway, signed_event):
        paid_payment.mark_refunded('customer request')
        payload, signature = signed_event('payment_intent.succeeded', intent_object(paid_payment.booking))

        post_webhook(api_client, payload, signature)

        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.REFUNDED

    def test_unhandled_event_type_is_acknowledged(self, api_client, stripe_gateway, signed_event):
        payload, signature = signed_event('customer.created', {'id': 'cus_123'})

        assert post_webhook(api_client, payload, signature).status_code == 200


# =============================================================================
# REFUNDS
# =============================================================================
class TestRefund:

    def test_admin_refunds_and_booking_is_cancelled(self, client_for, admin_user, paid_payment, stripe_gateway, stripe_client):
        response = client_for(admin_user).post(
            f'/api/payments/{paid_payment.id}/refund', {'reason': 'Guide unavailable'}, format='json'
        )

        assert response.status_code == 200
        stripe_client.refunds.create.assert_called_once()
        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.REFUNDED
        assert paid_payment.refund_reason == 'Guide unavailable'
        assert paid_payment.refunded_at is not None
        assert Booking.objects.get(pk=paid_payment.booking_id).status == BookingStatus.CANCELLED

    def test_only_paid_payments(self, client_for, admin_user, pending_payment, stripe_gateway, stripe_client):
        response = client_for(admin_user).post(f'/api/payments/{pending_payment.id}/refund', {}, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == "Can only refund paid payments"
        stripe_client.refunds.create.assert_not_called()

    def test_provider_failure_leaves_records_untouched(self, client_for, admin_user, paid_payment, stripe_gateway, stripe_client):
        stripe_client.refunds.create.side_effect = stripe.InvalidRequestError('Charge already refunded', 'payment_intent')

        response = client_for(admin_user).post(f'/api/payments/{paid_payment.id}/refund', {}, format='json')

        assert response.status_code == 400
        assert response.json()['message'].startswith("Stripe refund failed:")
        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.PAID
        assert Booking.objects.get(pk=paid_payment.booking_id).status == BookingStatus.CONFIRMED

    def test_payment_and_booking_update_together(self, paid_payment, stripe_gateway):
        with mock.patch.object(Booking, 'cancel_for_refund', side_effect=RuntimeError('database went away')):
            with pytest.raises(RuntimeError):
                PaymentService(stripe_gateway).refund(paid_payment.id)

        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.PAID

    def test_refund_cancels_completed_booking(self, client_for, admin_user, paid_payment, stripe_gateway, stripe_client):
        Booking.objects.filter(pk=paid_payment.booking_id).update(status=BookingStatus.COMPLETED)

        response = client_for(admin_user).post(
            f'/api/payments/{paid_payment.id}/refund', {'reason': 'Tour was cut short'}, format='json'
        )

        assert response.status_code == 200
        stripe_client.refunds.create.assert_called_once()
        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.REFUNDED
        assert Booking.objects.get(pk=paid_payment.booking_id).status == BookingStatus.CANCELLED

    def test_refund_without_stripe_intent_skips_provider(self, client_for, admin_user, paid_payment, stripe_gateway, stripe_client):
        Payment.objects.filter(pk=paid_payment.pk).update(stripe_payment_id='')

        response = client_for(admin_user).post(f'/api/payments/{paid_payment.id}/refund', {}, format='json')

        assert response.status_code == 200
        stripe_client.refunds.create.assert_not_called()
        paid_payment.refresh_from_db()
        assert paid_payment.status == PaymentStatus.REFUNDED
        assert Booking.objects.get(pk=paid_payment.booking_id).status == BookingStatus.CANCELLED

    def test_tourist_cannot_refund(self, client_for, tourist, paid_payment, stripe_gateway):
        response = client_for(tourist).post(f'/api/payments/{paid_payment.id}/refund', {}, format='json')

        assert response.status_code == 403


# =============================================================================
# READS
# =============================================================================
class TestPaymentReads:

    def test_list_scoped_to_role(self, client_for, tourist, guide, make_user, paid_payment):
        assert len(client_for(tourist).get('/api/payments').json()['data']) == 1
        assert len(client_for(guide).get('/api/payments').json()['data']) == 1
        assert client_for(make_user()).get('/api/payments').json()['data'] == []

    def test_by_booking_access(self, client_for, tourist, make_user, paid_payment):
        url = f'/api/payments/booking/{paid_payment.booking_id}'

        assert client_for(tourist).get(url).status_code == 200

        response = client_for(make_user()).get(url)
        assert response.status_code == 403
        assert response.json()['message'] == "You do not have access to this payment"

    def test_stats(self, client_for, admin_user, paid_payment):
        data = client_for(admin_user).get('/api/payments/stats').json()['data']

        assert data['total'] == 1
        assert data['paid'] == 1
        assert data['pending'] == 0
        assert data['total_revenue'] == 130.0
