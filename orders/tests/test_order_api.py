from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from assignment.models import DriverAssignment
from assignment.services.ledger import count_active
from garment_core.tests.fixtures import make_driver, make_order, make_user


class OrderAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.desk = make_user('desk', role='ecommerce')
        self.client.force_authenticate(self.desk)
        self.order = make_order('ORD001', status='pending', items={'V-RED-M': 2})

    def test_list_and_retrieve(self):
        response = self.client.get('/api/orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['order_number'], 'ORD001')

        response = self.client.get(f'/api/orders/{self.order.pk}/')
        self.assertEqual(response.data['items'][0]['quantity'], 2)
        self.assertTrue(response.data['delivery_location']['known'])

    def test_legal_transition(self):
        response = self.client.post(f'/api/orders/{self.order.pk}/transition/', {'status': 'confirmed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data['status'], 'confirmed')

    def test_illegal_transition_is_rejected(self):
        response = self.client.post(f'/api/orders/{self.order.pk}/transition/', {'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("from 'pending' to 'delivered'", response.data['error'])
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'pending')

    def test_unknown_status_is_rejected(self):
        response = self.client.post(f'/api/orders/{self.order.pk}/transition/', {'status': 'teleported'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('details', response.data)

    def test_cancelling_releases_the_driver(self):
        order = make_order('ORD002', status='in_transit')
        driver = make_driver('DRV001', status='busy')
        assignment = DriverAssignment.objects.create(driver=driver, order=order, status='accepted')

        response = self.client.post(f'/api/orders/{order.pk}/transition/', {'status': 'cancelled'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        assignment.refresh_from_db()
        driver.refresh_from_db()
        self.assertEqual(assignment.status, 'cancelled')
        self.assertEqual(driver.status, 'available')

    def test_delivering_completes_the_assignment(self):
        order = make_order('ORD002', status='in_transit')
        driver = make_driver('DRV001', status='busy')
        assignment = DriverAssignment.objects.create(driver=driver, order=order, status='in_transit')

        response = self.client.post(f'/api/orders/{order.pk}/transition/', {'status': 'delivered'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data['status'], 'delivered')
        assignment.refresh_from_db()
        driver.refresh_from_db()
        self.assertEqual(assignment.status, 'delivered')
        self.assertEqual(count_active(driver), 0)
        self.assertEqual(driver.status, 'available')

    def test_delivering_before_pickup_is_rejected(self):
        order = make_order('ORD002', status='in_transit')
        driver = make_driver('DRV001', status='busy')
        DriverAssignment.objects.create(driver=driver, order=order, status='assigned')

        response = self.client.post(f'/api/orders/{order.pk}/transition/', {'status': 'delivered'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        order.refresh_from_db()
        self.assertEqual(order.status, 'in_transit')
        self.assertEqual(count_active(driver), 1)

    def test_payment_transition(self):
        response = self.client.post(f'/api/orders/{self.order.pk}/payment/', {'payment_status': 'paid'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data['payment_status'], 'paid')

        response = self.client.post(f'/api/orders/{self.order.pk}/payment/', {'payment_status': 'failed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_dispatchable_lists_confirmed_and_processing(self):
        make_order('ORD002', status='confirmed')
        make_order('ORD003', status='processing')
        make_order('ORD004', status='delivered')

        response = self.client.get('/api/orders/dispatchable/')
        self.assertEqual(sorted(o['order_number'] for o in response.data), ['ORD002', 'ORD003'])

    def test_customer_sees_only_own_orders_and_cannot_transition(self):
        customer = make_user('hanna')
        own = make_order('ORD010', customer=customer)
        self.client.force_authenticate(customer)

        response = self.client.get('/api/orders/')
        self.assertEqual([o['order_number'] for o in response.data], ['ORD010'])

        response = self.client.post(f'/api/orders/{own.pk}/transition/', {'status': 'cancelled'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
