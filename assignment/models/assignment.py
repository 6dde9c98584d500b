from django.db import models
from django.utils import timezone

from core.locations import location_from
from core.state_machine import StateMachine

ASSIGNMENT_FLOW = StateMachine('assignment', {
    'assigned': ['accepted', 'picked_up', 'in_transit', 'cancelled'],
    'accepted': ['picked_up', 'in_transit', 'cancelled'],
    'picked_up': ['in_transit', 'delivered', 'cancelled'],
    'in_transit': ['delivered', 'cancelled'],
    'delivered': [],
    'cancelled': [],
})

TERMINAL_STATUSES = ('delivered', 'cancelled')


class DriverAssignmentQuerySet(models.QuerySet):

    def active(self):
        return self.exclude(status__in=TERMINAL_STATUSES)


class DriverAssignment(models.Model):
    """
    One driver delivering one order.

    Rows outside ``TERMINAL_STATUSES`` count against the driver's capacity.
    Pickup and delivery points are snapshots taken at dispatch time; missing
    coordinates stay NULL and read back as ``UnknownLocation``.
    """
    STATUS_CHOICES = [
        ('assigned', 'Assigned'),
        ('accepted', 'Accepted'),
        ('picked_up', 'Picked Up'),
        ('in_transit', 'In Transit'),
        ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'),
    ]

    driver = models.ForeignKey('fleet.Driver', on_delete=models.PROTECT, related_name='assignments')
    order = models.ForeignKey('orders.EcommerceOrder', on_delete=models.CASCADE, related_name='driver_assignments')
    assigned_by = models.CharField(max_length=150, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='assigned')

    pickup_name = models.CharField(max_length=200, blank=True)
    pickup_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    pickup_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    delivery_name = models.CharField(max_length=255, blank=True)
    delivery_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    delivery_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)

    assigned_at = models.DateTimeField(auto_now_add=True)
    accepted_at = models.DateTimeField(null=True, blank=True)
    actual_pickup_time = models.DateTimeField(null=True, blank=True)
    actual_delivery_time = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    notes = models.TextField(blank=True)
    notification_sent = models.BooleanField(default=False)

    objects = DriverAssignmentQuerySet.as_manager()

    class Meta:
        ordering = ['-assigned_at', '-id']
        indexes = [
            models.Index(fields=['driver', 'status'], name='assign_driver_status_idx'),
            models.Index(fields=['order', 'status'], name='assign_order_status_idx'),
        ]

    def __str__(self):
        return f"Assignment #{self.pk} {self.order_id} -> driver {self.driver_id} ({self.status})"

    @property
    def is_active(self):
        return self.status not in TERMINAL_STATUSES

    @property
    def pickup_location(self):
        return location_from(self.pickup_latitude, self.pickup_longitude, self.pickup_name)

    @property
    def delivery_location(self):
        return location_from(self.delivery_latitude, self.delivery_longitude, self.delivery_name)

    def set_locations(self, pickup, delivery):
        self.pickup_name = pickup.name
        self.pickup_latitude = pickup.latitude
        self.pickup_longitude = pickup.longitude
        self.delivery_name = delivery.name
        self.delivery_latitude = delivery.latitude
        self.delivery_longitude = delivery.longitude

    def transition_to(self, new_status, at=None):
        """Move along ``ASSIGNMENT_FLOW`` and stamp the matching timestamp."""
        if not ASSIGNMENT_FLOW.apply(self, new_status):
            return False
        at = at or timezone.now()
        update_fields = ['status', 'updated_at']
        if new_status == 'accepted':
            self.accepted_at = at
            update_fields.append('accepted_at')
        elif new_status == 'picked_up':
            self.actual_pickup_time = at
            update_fields.append('actual_pickup_time')
        elif new_status == 'delivered':
            self.actual_delivery_time = at
            update_fields.append('actual_delivery_time')
        elif new_status == 'cancelled':
            self.cancelled_at = at
            update_fields.append('cancelled_at')
        self.save(update_fields=update_fields)
        return True
