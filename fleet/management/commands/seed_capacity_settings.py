from django.core.management.base import BaseCommand

from core.models import SystemSetting
from fleet.services.capacity import DEFAULT_CAPACITY_LIMITS, capacity_setting_key


class Command(BaseCommand):
    help = 'Create capacity_limit_* settings with the default per-vehicle limits'

    def add_arguments(self, parser):
        parser.add_argument('--reset', action='store_true', help='Overwrite existing limits with the defaults')

    def handle(self, *args, **options):
        for vehicle_type, limit in DEFAULT_CAPACITY_LIMITS.items():
            key = capacity_setting_key(vehicle_type)
            defaults = {
                'value': str(limit),
                'description': f"Maximum active orders for {vehicle_type} drivers",
                'updated_by': 'seed_capacity_settings',
            }
            if options['reset']:
                SystemSetting.objects.update_or_create(key=key, defaults=defaults)
                self.stdout.write(f"{key} = {limit}")
                continue
            setting, created = SystemSetting.objects.get_or_create(key=key, defaults=defaults)
            state = 'created' if created else 'kept'
            self.stdout.write(f"{key} = {setting.value} ({state})")
        self.stdout.write(self.style.SUCCESS('Capacity settings ready.'))
