import os

import django

# Configure Django settings before any tests are collected
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'garment_core.tests.test_settings')
django.setup()
