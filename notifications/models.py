from django.conf import settings
from django.db import models


class Notification(models.Model):
    USER_TYPE_CHOICES = [
        ('driver', 'Driver'),
        ('customer', 'Customer'),
        ('ecommerce', 'E-commerce'),
        ('admin', 'Admin'),
    ]

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications',
        help_text="Empty for notifications addressed to every user of user_type",
    )
    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES)
    notification_type = models.CharField(max_length=50, blank=True)
    title = models.CharField(max_length=200)
    description = models.TextField()
    href = models.CharField(max_length=255, blank=True)
    order = models.ForeignKey(
        'orders.EcommerceOrder',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications',
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"[{self.user_type}] {self.title}"

    def mark_read(self):
        if not self.is_read:
            self.is_read = True
            self.save(update_fields=['is_read'])
