import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from assignment.services.ledger import cancel_active_for_order, update_assignment_status
from core.permissions import ROLE_ADMIN, ROLE_ECOMMERCE, IsOperations, user_has_role
from orders.models import ORDER_FLOW, EcommerceOrder
from orders.serializers import EcommerceOrderSerializer, OrderTransitionSerializer, PaymentTransitionSerializer

logger = logging.getLogger(__name__)


class OrderViewSet(viewsets.ReadOnlyModelViewSet):
    """
    E-commerce orders. Customers see their own orders; status changes are
    restricted to operations staff and go through the order state machine.
    """
    queryset = EcommerceOrder.objects.select_related('shop').prefetch_related('items')
    serializer_class = EcommerceOrderSerializer
    filterset_fields = ['status', 'payment_status', 'shop']
    search_fields = ['order_number', 'customer_name', 'customer_email', 'tracking_number']
    ordering_fields = ['created_at', 'status', 'total_amount']

    def get_permissions(self):
        if self.action in ('transition', 'payment', 'dispatchable'):
            return [IsOperations()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        if not user_has_role(self.request.user, ROLE_ADMIN, ROLE_ECOMMERCE):
            queryset = queryset.filter(customer=self.request.user)
        return queryset

    def handle_transition(self, order, transition_func, *args):
        try:
            transition_func(*args)
            return Response(self.get_serializer(order).data)
        except ValidationError as e:
            return Response({'error': e.message, 'details': {}}, status=status.HTTP_400_BAD_REQUEST)

    @action(detail=False, methods=['get'])
    def dispatchable(self, request):
        """Orders waiting for a driver."""
        orders = self.get_queryset().filter(status__in=EcommerceOrder.DISPATCHABLE_STATUSES)
        return Response(self.get_serializer(orders, many=True).data)

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        order = self.get_object()
        serializer = OrderTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_status = serializer.validated_data['status']

        if new_status == 'cancelled' and ORDER_FLOW.can_transition(order.status, new_status):
            return self.handle_transition(order, self._cancel, order)
        if new_status == 'delivered' and order.driver_assignments.active().exists():
            return self.handle_transition(order, self._deliver, order)
        return self.handle_transition(order, order.transition_to, new_status)

    def _deliver(self, order):
        # Delivery is recorded on the assignment so the driver's slot is released.
        ORDER_FLOW.check(order.status, 'delivered')
        with transaction.atomic():
            for assignment in order.driver_assignments.active():
                update_assignment_status(assignment, 'delivered')
        order.refresh_from_db()

    def _cancel(self, order):
        with transaction.atomic():
            order.mark_cancelled()
            cancelled = cancel_active_for_order(order)
        if cancelled:
            logger.info(f"Order {order.order_number} cancelled; released {len(cancelled)} assignment(s)")

    @action(detail=True, methods=['post'])
    def payment(self, request, pk=None):
        order = self.get_object()
        serializer = PaymentTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self.handle_transition(order, order.set_payment_status, serializer.validated_data['payment_status'])
