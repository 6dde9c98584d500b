from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from assignment.models import DriverAssignment
from garment_core.tests.fixtures import make_driver, make_order, make_user


class AssignmentAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.desk = make_user('desk', role='ecommerce')
        self.driver_user = make_user('abebe', role='driver')
        self.other_user = make_user('kebede', role='driver')
        self.driver = make_driver('DRV001', status='busy', user=self.driver_user)
        self.other_driver = make_driver('DRV002', status='busy', user=self.other_user)
        self.order = make_order('ORD001', status='in_transit')
        self.assignment = DriverAssignment.objects.create(driver=self.driver, order=self.order)
        self.other_assignment = DriverAssignment.objects.create(driver=self.other_driver, order=make_order('ORD002'))

    def status_url(self, assignment):
        return f'/api/assignments/{assignment.pk}/status/'

    def test_operations_see_all_assignments(self):
        self.client.force_authenticate(self.desk)
        response = self.client.get('/api/assignments/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_driver_sees_only_own_assignments(self):
        self.client.force_authenticate(self.driver_user)
        response = self.client.get('/api/assignments/')
        self.assertEqual([a['id'] for a in response.data], [self.assignment.pk])

    def test_active_filter(self):
        self.other_assignment.transition_to('cancelled')
        self.client.force_authenticate(self.desk)
        response = self.client.get('/api/assignments/', {'active': 'true'})
        self.assertEqual([a['id'] for a in response.data], [self.assignment.pk])

    def test_by_driver(self):
        self.client.force_authenticate(self.desk)
        response = self.client.get('/api/assignments/by-driver/DRV002/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([a['id'] for a in response.data], [self.other_assignment.pk])

        response = self.client.get('/api/assignments/by-driver/NOPE/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_driver_cannot_list_another_drivers_assignments(self):
        self.client.force_authenticate(self.driver_user)
        response = self.client.get('/api/assignments/by-driver/DRV002/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_driver_reports_progress(self):
        self.client.force_authenticate(self.driver_user)
        response = self.client.patch(self.status_url(self.assignment), {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(response.data['status'], 'accepted')

    def test_driver_delivery_completes_order(self):
        self.client.force_authenticate(self.driver_user)
        for target in ('picked_up', 'delivered'):
            response = self.client.patch(self.status_url(self.assignment), {'status': target}, format='json')
            self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)

        self.order.refresh_from_db()
        self.driver.refresh_from_db()
        self.assertEqual(self.order.status, 'delivered')
        self.assertEqual(self.driver.status, 'available')

    def test_driver_cannot_cancel(self):
        self.client.force_authenticate(self.driver_user)
        response = self.client.patch(self.status_url(self.assignment), {'status': 'cancelled'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_driver_cannot_update_another_drivers_assignment(self):
        self.client.force_authenticate(self.driver_user)
        response = self.client.patch(self.status_url(self.other_assignment), {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_illegal_transition(self):
        self.client.force_authenticate(self.desk)
        response = self.client.patch(self.status_url(self.assignment), {'status': 'delivered'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("from 'assigned' to 'delivered'", response.data['error'])

    def test_operations_can_cancel(self):
        self.client.force_authenticate(self.desk)
        response = self.client.patch(self.status_url(self.assignment), {'status': 'cancelled'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.driver.refresh_from_db()
        self.assertEqual(self.driver.status, 'available')

    def test_missing_assignment(self):
        self.client.force_authenticate(self.desk)
        response = self.client.patch('/api/assignments/9999/status/', {'status': 'accepted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unauthenticated(self):
        response = self.client.get('/api/assignments/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
