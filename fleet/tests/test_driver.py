from django.test import TestCase
from django.utils import timezone

from fleet.services.status_services import refresh_driver_status, update_driver_status
from garment_core.tests.fixtures import make_driver


class DriverModelTest(TestCase):

    def setUp(self):
        self.driver = make_driver('DRV001', vehicle_type='car')

    def test_defaults(self):
        self.assertEqual(self.driver.status, 'available')
        self.assertTrue(self.driver.is_available)
        self.assertIsNone(self.driver.current_latitude)
        self.assertIsNone(self.driver.last_location_update)

    def test_update_location_sets_values_and_timestamp(self):
        self.driver.update_location(9.012345, 38.765432)
        self.driver.refresh_from_db()

        self.assertEqual(float(self.driver.current_latitude), 9.012345)
        self.assertEqual(float(self.driver.current_longitude), 38.765432)
        self.assertLess(abs((timezone.now() - self.driver.last_location_update).total_seconds()), 5)


class DriverStatusServiceTest(TestCase):

    def test_busy_when_active_assignments_remain(self):
        driver = make_driver('DRV001')
        self.assertEqual(refresh_driver_status(driver, 2), 'busy')
        driver.refresh_from_db()
        self.assertEqual(driver.status, 'busy')

    def test_available_when_no_active_assignments(self):
        driver = make_driver('DRV001')
        update_driver_status(driver, 'busy')
        self.assertEqual(refresh_driver_status(driver, 0), 'available')
        driver.refresh_from_db()
        self.assertEqual(driver.status, 'available')

    def test_offline_driver_is_left_alone(self):
        driver = make_driver('DRV001', status='offline')
        self.assertEqual(refresh_driver_status(driver, 0), 'offline')
        driver.refresh_from_db()
        self.assertEqual(driver.status, 'offline')
