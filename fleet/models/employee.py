from django.conf import settings
from django.db import models


class Employee(models.Model):
    """
    Factory staff record. Employees in the drivers department can be
    dispatched before a driver record exists for them.
    """
    employee_id = models.CharField(max_length=32, unique=True)
    full_name = models.CharField(max_length=150)
    department = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    profile_picture = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='employee_profile',
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['employee_id']

    def __str__(self):
        return f"{self.employee_id} {self.full_name}"
