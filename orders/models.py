from django.conf import settings
from django.db import models
from django.utils import timezone

from core.locations import location_from
from core.state_machine import StateMachine

ORDER_FLOW = StateMachine('order', {
    'pending': ['confirmed', 'cancelled'],
    'confirmed': ['processing', 'in_transit', 'cancelled'],
    'processing': ['shipped', 'in_transit', 'cancelled'],
    'shipped': ['in_transit', 'delivered', 'cancelled'],
    'in_transit': ['delivered', 'cancelled'],
    'delivered': [],
    'cancelled': [],
})

PAYMENT_FLOW = StateMachine('payment', {
    'pending': ['paid', 'failed'],
    'failed': ['pending', 'paid'],
    'paid': ['refunded'],
    'refunded': [],
})


class EcommerceOrder(models.Model):
    """
    Storefront order and its shipping state.

    ``status`` and ``payment_status`` only change through ``ORDER_FLOW`` and
    ``PAYMENT_FLOW``; the ``mark_*``/``set_*`` methods raise
    ``InvalidTransitionError`` for illegal moves.
    """
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('confirmed', 'Confirmed'),
        ('processing', 'Processing'),
        ('shipped', 'Shipped'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Awaiting Payment'),
        ('paid', 'Paid'),
        ('failed', 'Failed'),
        ('refunded', 'Refunded'),
    ]

    # Orders the dispatch desk works from
    DISPATCHABLE_STATUSES = ('confirmed', 'processing')

    order_number = models.CharField(max_length=32, unique=True)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='ecommerce_orders',
    )
    customer_name = models.CharField(max_length=150)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=32, blank=True)

    delivery_address = models.CharField(max_length=255, blank=True)
    delivery_city = models.CharField(max_length=100, blank=True)
    delivery_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    delivery_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    payment_method = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    shop = models.ForeignKey(
        'shops.Shop',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='orders',
    )
    tracking_number = models.CharField(max_length=64, blank=True)
    dispatch_date = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='orders_order_status_idx'),
        ]

    def __str__(self):
        return f"{self.order_number} ({self.status})"

    @property
    def delivery_location(self):
        return location_from(
            self.delivery_latitude,
            self.delivery_longitude,
            self.delivery_address or 'Customer Address',
        )

    @property
    def can_dispatch(self):
        return ORDER_FLOW.can_transition(self.status, 'in_transit')

    def transition_to(self, new_status, at=None):
        """Move the order along ``ORDER_FLOW``; re-applying the current status is a no-op."""
        if not ORDER_FLOW.apply(self, new_status):
            return False
        update_fields = ['status', 'updated_at']
        if new_status == 'delivered':
            self.delivered_at = at or timezone.now()
            update_fields.append('delivered_at')
        self.save(update_fields=update_fields)
        return True

    def mark_dispatched(self, shop, tracking_number, dispatch_time=None):
        ORDER_FLOW.apply(self, 'in_transit')
        self.shop = shop
        self.tracking_number = tracking_number
        self.dispatch_date = dispatch_time or timezone.now()
        self.save(update_fields=['status', 'shop', 'tracking_number', 'dispatch_date', 'updated_at'])

    def mark_delivered(self, delivery_time=None):
        return self.transition_to('delivered', at=delivery_time)

    def mark_cancelled(self):
        return self.transition_to('cancelled')

    def set_payment_status(self, new_status):
        if not PAYMENT_FLOW.apply(self, new_status, field='payment_status'):
            return False
        self.save(update_fields=['payment_status', 'updated_at'])
        return True


class OrderItem(models.Model):
    order = models.ForeignKey(EcommerceOrder, on_delete=models.CASCADE, related_name='items')
    product_variant_id = models.CharField(max_length=64)
    product_name = models.CharField(max_length=200, blank=True)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    # Set once the dispatching shop's stock has been decremented for this line
    stock_reduced = models.BooleanField(default=False)

    class Meta:
        ordering = ['id']

    def __str__(self):
        return f"{self.order.order_number}: {self.quantity} x {self.product_variant_id}"
