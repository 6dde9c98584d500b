from django.core.exceptions import ValidationError
from django.db import models


class DispatchRecord(models.Model):
    """
    Append-only log entry written for every successful dispatch.

    The live delivery state lives on the linked ``DriverAssignment``; the
    record itself is never updated after it is written.
    """
    STATUS_CHOICES = [
        ('assigned', 'Assigned'),
    ]

    order = models.ForeignKey('orders.EcommerceOrder', on_delete=models.PROTECT, related_name='dispatches')
    driver = models.ForeignKey('fleet.Driver', on_delete=models.PROTECT, related_name='dispatches')
    shop = models.ForeignKey('shops.Shop', on_delete=models.PROTECT, related_name='dispatches')
    assignment = models.OneToOneField(
        'assignment.DriverAssignment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='dispatch_record',
    )

    tracking_number = models.CharField(max_length=64)
    estimated_delivery_time = models.DateTimeField(null=True, blank=True)
    transport_cost = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='assigned')
    created_by = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['tracking_number'], name='dispatch_tracking_idx'),
        ]

    def __str__(self):
        return f"Dispatch {self.tracking_number} ({self.order_id} via driver {self.driver_id})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("Dispatch records are append-only and cannot be modified.")
        super().save(*args, **kwargs)
