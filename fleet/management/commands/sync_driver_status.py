from django.core.management.base import BaseCommand
from django.db import transaction

from assignment.services.ledger import with_active_counts
from fleet.models import Driver
from fleet.services.status_services import refresh_driver_status


class Command(BaseCommand):
    help = 'Recompute busy/available for every online driver from their active assignments'

    def handle(self, *args, **options):
        changed = 0
        with transaction.atomic():
            for driver in with_active_counts(Driver.objects.exclude(status='offline')):
                before = driver.status
                after = refresh_driver_status(driver, driver.active_order_count)
                if before != after:
                    changed += 1
                    self.stdout.write(f"{driver.driver_id}: {before} -> {after}")
        self.stdout.write(self.style.SUCCESS(f'Driver statuses synced ({changed} changed).'))
