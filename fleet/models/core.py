from django.conf import settings
from django.db import models
from django.utils import timezone


class Driver(models.Model):
    """
    A delivery driver and the vehicle they operate.

    The vehicle type decides how many deliveries the driver may hold at
    once (see ``fleet.services.capacity``).
    """
    STATUS_CHOICES = [
        ('available', 'Available'),
        ('busy', 'Busy'),
        ('offline', 'Offline'),
    ]

    VEHICLE_TYPE_CHOICES = [
        ('motorbike', 'Motorbike'),
        ('car', 'Car'),
        ('van', 'Van'),
        ('truck', 'Truck'),
    ]

    driver_id = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=150)
    phone = models.CharField(max_length=32, blank=True)
    license_plate = models.CharField(max_length=32, blank=True)
    vehicle_type = models.CharField(max_length=20, choices=VEHICLE_TYPE_CHOICES, default='motorbike')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='available')

    employee = models.OneToOneField(
        'fleet.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driver_profile',
    )
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='driver_profile',
        help_text="Account that receives delivery notifications",
    )

    # Location tracking
    current_latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    current_longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    last_location_update = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['driver_id']
        indexes = [
            models.Index(fields=['status'], name='fleet_driver_status_idx'),
            models.Index(fields=['vehicle_type'], name='fleet_driver_vtype_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.vehicle_type}, {self.status})"

    def update_location(self, latitude, longitude):
        """Update the driver's current location and timestamp."""
        self.current_latitude = latitude
        self.current_longitude = longitude
        self.last_location_update = timezone.now()
        self.save(update_fields=['current_latitude', 'current_longitude', 'last_location_update', 'updated_at'])

    @property
    def is_available(self):
        return self.status == 'available'

    @property
    def is_offline(self):
        return self.status == 'offline'


class DriverLocation(models.Model):
    """
    Historical driver positions reported by the driver app.
    """
    driver = models.ForeignKey(Driver, on_delete=models.CASCADE, related_name='location_history')
    timestamp = models.DateTimeField(auto_now_add=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6)
    longitude = models.DecimalField(max_digits=9, decimal_places=6)
    speed = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, help_text="Speed in km/h")
    heading = models.DecimalField(max_digits=5, decimal_places=2, null=True, blank=True, help_text="Heading in degrees")

    class Meta:
        ordering = ['-timestamp']
        verbose_name_plural = "Driver Locations"

    def __str__(self):
        return f"{self.driver.driver_id} - {self.timestamp.strftime('%Y-%m-%d %H:%M:%S')}"
