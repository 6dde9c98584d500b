from unittest import mock

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase, override_settings

from assignment.models import DriverAssignment
from core.state_machine import InvalidTransitionError
from dispatch.exceptions import (
    CapacityExceededError,
    InsufficientStockError,
    MissingFieldsError,
    NotFoundError,
    TransactionError,
)
from dispatch.models import DispatchRecord
from dispatch.services.orchestrator import assign_dispatch
from fleet.models import Driver
from garment_core.tests.fixtures import make_driver, make_employee, make_order, make_shop, make_user
from notifications.models import Notification
from shops.services.inventory import available_stock


class DispatchTestMixin:

    def setUp(self):
        self.customer = make_user('hanna')
        self.driver_user = make_user('abebe', role='driver')
        self.driver = make_driver('DRV001', vehicle_type='motorbike', user=self.driver_user, name='Abebe')
        self.shop = make_shop('SHOP01', stock={'V-RED-M': 50})
        self.order = make_order('ORD001', status='confirmed', items={'V-RED-M': 20}, customer=self.customer)

    def dispatch(self, **overrides):
        kwargs = {
            'order_id': 'ORD001',
            'driver_id': 'DRV001',
            'shop_id': 'SHOP01',
            'tracking_number': 'TRK-001',
            'requested_by': 'desk',
        }
        kwargs.update(overrides)
        return assign_dispatch(**kwargs)

    def assertNothingDispatched(self):
        self.order.refresh_from_db()
        self.driver.refresh_from_db()
        self.assertEqual(self.order.status, 'confirmed')
        self.assertEqual(self.order.tracking_number, '')
        self.assertEqual(self.driver.status, 'available')
        self.assertFalse(DriverAssignment.objects.filter(order=self.order).exists())
        self.assertFalse(DispatchRecord.objects.exists())
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 50)
        self.assertFalse(Notification.objects.exists())


class AssignDispatchTest(DispatchTestMixin, TestCase):

    def test_successful_dispatch(self):
        outcome = self.dispatch(notes='Handle with care')

        record = outcome.record
        self.assertEqual(record.status, 'assigned')
        self.assertEqual(record.tracking_number, 'TRK-001')
        self.assertEqual(record.created_by, 'desk')
        self.assertEqual(record.assignment, outcome.assignment)

        self.assertEqual(outcome.assignment.status, 'assigned')
        self.assertEqual(outcome.assignment.pickup_location.name, 'Shop SHOP01')
        self.assertTrue(outcome.assignment.notification_sent)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'in_transit')
        self.assertEqual(self.order.shop, self.shop)
        self.assertEqual(self.order.tracking_number, 'TRK-001')
        self.assertIsNotNone(self.order.dispatch_date)

        self.driver.refresh_from_db()
        self.assertEqual(self.driver.status, 'busy')
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 30)
        self.assertEqual(outcome.inventory_shortfalls, [])
        self.assertTrue(outcome.driver_notified)
        self.assertTrue(outcome.customer_notified)
        self.assertEqual(Notification.objects.filter(recipient=self.driver_user).count(), 1)
        self.assertEqual(Notification.objects.filter(recipient=self.customer).count(), 1)

    def test_lookup_by_primary_keys(self):
        outcome = self.dispatch(order_id=str(self.order.pk), driver_id=str(self.driver.pk), shop_id=str(self.shop.pk))
        self.assertEqual(outcome.record.order, self.order)

    def test_missing_fields_are_reported_together(self):
        with self.assertRaises(MissingFieldsError) as cm:
            self.dispatch(driver_id='', tracking_number=None)

        self.assertEqual(cm.exception.missing, ['driverId', 'trackingNumber'])
        self.assertEqual(cm.exception.status_code, 400)
        self.assertNothingDispatched()

    def test_unknown_order(self):
        with self.assertRaises(NotFoundError) as cm:
            self.dispatch(order_id='ORD404')
        self.assertEqual(cm.exception.as_payload()['error'], 'Order not found')
        self.assertEqual(cm.exception.status_code, 404)
        self.assertNothingDispatched()

    def test_unknown_driver(self):
        with self.assertRaises(NotFoundError) as cm:
            self.dispatch(driver_id='DRV404')
        self.assertEqual(cm.exception.entity, 'driver')
        self.assertNothingDispatched()

    def test_unknown_shop(self):
        with self.assertRaises(NotFoundError) as cm:
            self.dispatch(shop_id='SHOP404')
        self.assertEqual(cm.exception.entity, 'shop')
        self.assertNothingDispatched()

    def test_capacity_exceeded_changes_nothing(self):
        for number in range(3):
            DriverAssignment.objects.create(driver=self.driver, order=make_order(f'FILL{number}'))

        with self.assertRaises(CapacityExceededError) as cm:
            self.dispatch()

        self.assertIn('already has maximum allowed orders (3)', cm.exception.message)
        self.assertEqual(DriverAssignment.objects.filter(driver=self.driver).active().count(), 3)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'confirmed')
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 50)
        self.assertFalse(DispatchRecord.objects.exists())

    def test_pending_order_cannot_be_dispatched(self):
        make_order('ORD002', status='pending')
        with self.assertRaises(InvalidTransitionError):
            self.dispatch(order_id='ORD002')
        self.assertFalse(DispatchRecord.objects.exists())

    def test_delivered_order_cannot_be_dispatched(self):
        make_order('ORD002', status='delivered')
        with self.assertRaises(ValidationError):
            self.dispatch(order_id='ORD002')

    def test_shortfall_is_reported_but_dispatch_succeeds(self):
        make_order('ORD002', items={'V-RED-M': 80})

        outcome = self.dispatch(order_id='ORD002', tracking_number='TRK-002')

        self.assertEqual(
            [s.as_dict() for s in outcome.inventory_shortfalls],
            [{'product_variant_id': 'V-RED-M', 'requested': 80, 'available': 50}],
        )
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 50)
        self.assertEqual(outcome.record.order.order_number, 'ORD002')

    @override_settings(DISPATCH_STRICT_INVENTORY=True)
    def test_strict_inventory_rejects_shortfall(self):
        self.order.items.update(quantity=80)

        with self.assertRaises(InsufficientStockError) as cm:
            self.dispatch()

        self.assertEqual(cm.exception.details['shortfalls'][0]['available'], 50)
        self.assertNothingDispatched()

    def test_inventory_failure_does_not_undo_dispatch(self):
        with mock.patch('dispatch.services.orchestrator.reduce_for_order', side_effect=RuntimeError('boom')):
            outcome = self.dispatch()

        self.assertFalse(outcome.inventory_applied)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'in_transit')
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 50)

    def test_notification_failure_does_not_undo_dispatch(self):
        with mock.patch('dispatch.services.orchestrator.notify_driver_new_delivery', side_effect=RuntimeError('sink')):
            outcome = self.dispatch()

        self.assertFalse(outcome.driver_notified)
        self.assertTrue(outcome.customer_notified)
        self.assertEqual(DispatchRecord.objects.count(), 1)

    def test_database_failure_rolls_back(self):
        with mock.patch.object(DispatchRecord.objects, 'create', side_effect=DatabaseError('disk I/O error')):
            with self.assertRaises(TransactionError) as cm:
                self.dispatch()

        self.assertEqual(cm.exception.status_code, 500)
        self.assertNothingDispatched()

    def test_redispatch_moves_order_to_new_driver(self):
        first = self.dispatch()
        second_driver = make_driver('DRV002', vehicle_type='van')

        outcome = self.dispatch(driver_id='DRV002', tracking_number='TRK-002')

        first.assignment.refresh_from_db()
        self.driver.refresh_from_db()
        self.assertEqual(first.assignment.status, 'cancelled')
        self.assertEqual(self.driver.status, 'available')
        self.assertEqual(outcome.cancelled_assignments, 1)
        self.assertEqual(self.order.driver_assignments.active().get().driver, second_driver)
        self.assertEqual(DispatchRecord.objects.filter(order=self.order).count(), 2)
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 30)

    def test_redispatch_from_another_shop_returns_stock(self):
        self.dispatch()
        other_shop = make_shop('SHOP02', stock={'V-RED-M': 25})

        outcome = self.dispatch(shop_id='SHOP02', tracking_number='TRK-002')

        self.assertEqual(outcome.inventory_shortfalls, [])
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 50)
        self.assertEqual(available_stock(other_shop, 'V-RED-M'), 5)
        self.order.refresh_from_db()
        self.assertEqual(self.order.shop, other_shop)

    def test_redispatch_takes_lines_that_were_short_before(self):
        self.order.items.update(quantity=60)
        first = self.dispatch()
        self.assertEqual(len(first.inventory_shortfalls), 1)
        self.shop.inventory.update(stock=70)

        outcome = self.dispatch(tracking_number='TRK-002')

        self.assertEqual(outcome.inventory_shortfalls, [])
        self.assertEqual(available_stock(self.shop, 'V-RED-M'), 10)

    def test_offline_driver_keeps_offline_status(self):
        self.driver.status = 'offline'
        self.driver.save()

        self.dispatch()

        self.driver.refresh_from_db()
        self.assertEqual(self.driver.status, 'offline')

    def test_driver_created_from_employee(self):
        employee = make_employee('EMP100', department='Drivers')

        outcome = self.dispatch(driver_id='EMP100')

        driver = outcome.assignment.driver
        self.assertEqual(driver.driver_id, 'DRV-EMP100')
        self.assertEqual(driver.employee, employee)
        self.assertEqual(driver.vehicle_type, 'car')
        self.assertEqual(driver.status, 'busy')

    def test_employee_driver_discarded_when_dispatch_fails(self):
        make_employee('EMP100', department='Drivers')

        with self.assertRaises(NotFoundError):
            self.dispatch(driver_id='EMP100', shop_id='SHOP404')

        self.assertFalse(Driver.objects.filter(driver_id='DRV-EMP100').exists())

    def test_employee_outside_drivers_department_is_not_a_driver(self):
        make_employee('EMP200', department='Sales')
        with self.assertRaises(NotFoundError):
            self.dispatch(driver_id='EMP200')


class DispatchRecordTest(DispatchTestMixin, TestCase):

    def test_records_are_append_only(self):
        record = self.dispatch().record
        record.notes = 'changed'
        with self.assertRaises(ValidationError):
            record.save()
        record.refresh_from_db()
        self.assertEqual(record.notes, '')
