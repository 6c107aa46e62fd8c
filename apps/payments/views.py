from rest_framework import viewsets
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from apps.accounts.permissions import IsAdmin, IsTourist
from apps.core.mixins import EnvelopeListMixin
from apps.core.responses import created_response, success_response
from services.stripe_service import get_stripe_service
from .filters import PaymentFilter
from .serializers import (
    BookingPaymentSerializer,
    ConfirmPaymentSerializer,
    PaymentIntentSerializer,
    PaymentSerializer,
    RefundSerializer,
)
from .services import PaymentService

TOURIST_ACTIONS = ('create_payment_intent', 'create_checkout_session', 'confirm')


class PaymentViewSet(EnvelopeListMixin, viewsets.GenericViewSet):
    """
    API endpoint for Stripe payments on confirmed bookings.
    """
    serializer_class = PaymentSerializer
    filterset_class = PaymentFilter
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        return PaymentService.scoped_queryset(self.request.user)

    def get_permissions(self):
        if self.action in TOURIST_ACTIONS:
            return [IsTourist()]
        if self.action == 'refund':
            return [IsAdmin()]
        return super().get_permissions()

    def get_payment_service(self):
        return PaymentService(get_stripe_service())

    def list(self, request):
        queryset = self.filter_queryset(self.get_queryset())
        return self.paginated_response(queryset, message="Payments retrieved successfully")

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return success_response(PaymentService.stats(request.user), "Payment stats retrieved successfully")

    def retrieve(self, request, pk=None):
        payment = PaymentService.get_payment(pk, request.user)
        return success_response(PaymentSerializer(payment).data, "Payment retrieved successfully")

    @action(detail=False, methods=['get'], url_path=r'booking/(?P<booking_id>[0-9a-fA-F-]{36})')
    def by_booking(self, request, booking_id=None):
        payment = PaymentService.get_payment_for_booking(booking_id, request.user)
        return success_response(PaymentSerializer(payment).data, "Payment retrieved successfully")

    @action(detail=False, methods=['post'], url_path='create-payment-intent')
    def create_payment_intent(self, request):
        serializer = BookingPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_payment_service().create_payment_intent(
            serializer.validated_data['booking_id'], request.user
        )
        return created_response(PaymentIntentSerializer(result).data, "Payment intent created successfully")

    @action(detail=False, methods=['post'], url_path='create-checkout-session')
    def create_checkout_session(self, request):
        serializer = BookingPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_payment_service().create_checkout_session(
            serializer.validated_data['booking_id'], request.user
        )
        return created_response(result, "Checkout session created successfully")

    @action(detail=False, methods=['post'])
    def confirm(self, request):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = self.get_payment_service().confirm_payment(
            serializer.validated_data['booking_id'],
            serializer.validated_data['payment_intent_id'],
            request.user,
        )
        return success_response(PaymentSerializer(payment).data, "Payment confirmed successfully")

    @action(detail=True, methods=['post'])
    def refund(self, request, pk=None):
        serializer = RefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        payment = self.get_payment_service().refund(pk, serializer.validated_data['reason'])
        return success_response(PaymentSerializer(payment).data, "Payment refunded successfully")


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def stripe_webhook(request):
    """Receive Stripe events. The raw body is verified before it is parsed."""
    signature = request.META.get('HTTP_STRIPE_SIGNATURE', '')
    PaymentService(get_stripe_service()).handle_webhook(request.body, signature)
    return Response({'received': True})
