from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from core.models import SystemSetting
from core.permissions import user_role
from garment_core.tests.fixtures import make_user


class AuthAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = make_user('desk', role='ecommerce', password='s3cret-pass')

    def test_login_returns_token_pair_and_bearer_token_works(self):
        response = self.client.post('/api/auth/login/', {'username': 'desk', 'password': 's3cret-pass'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['username'], 'desk')
        self.assertEqual(me.data['role'], 'ecommerce')

    def test_wrong_password_is_rejected(self):
        response = self.client.post('/api/auth/login/', {'username': 'desk', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)

    def test_anonymous_request_gets_401_with_error_body(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertIn('error', response.data)
        self.assertIn('details', response.data)

    def test_superuser_counts_as_admin(self):
        self.user.is_superuser = True
        self.user.save()
        self.assertEqual(user_role(self.user), 'admin')


class SystemSettingAPITest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.admin = make_user('boss', role='admin')
        self.desk = make_user('desk', role='ecommerce')

    def test_admin_can_create_and_update_setting(self):
        self.client.force_authenticate(self.admin)
        response = self.client.post('/api/core/settings/', {'key': 'capacity_limit_van', 'value': '12'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, msg=response.data)
        self.assertEqual(response.data['updated_by'], 'boss')

        response = self.client.patch('/api/core/settings/capacity_limit_van/', {'value': '8'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK, msg=response.data)
        self.assertEqual(SystemSetting.objects.get(key='capacity_limit_van').value, '8')

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(self.desk)
        response = self.client.get('/api/core/settings/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
