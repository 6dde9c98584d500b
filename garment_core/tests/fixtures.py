"""
Object builders shared by the app test suites.
"""
from decimal import Decimal

from django.contrib.auth.models import Group, User

from fleet.models import Driver, Employee
from orders.models import EcommerceOrder, OrderItem
from shops.models import Shop, ShopInventory


def make_user(username, role=None, password='pass1234'):
    user = User.objects.create_user(username=username, password=password)
    if role:
        group, _ = Group.objects.get_or_create(name=role)
        user.groups.add(group)
    return user


def make_driver(driver_id='DRV001', vehicle_type='motorbike', status='available', user=None, **extra):
    defaults = {
        'name': f"Driver {driver_id}",
        'phone': '+251911000000',
        'license_plate': f"AA-{driver_id}",
    }
    defaults.update(extra)
    return Driver.objects.create(
        driver_id=driver_id,
        vehicle_type=vehicle_type,
        status=status,
        user=user,
        **defaults,
    )


def make_employee(employee_id='EMP100', department='Drivers', user=None, **extra):
    defaults = {'full_name': f"Employee {employee_id}", 'phone': '+251922000000'}
    defaults.update(extra)
    return Employee.objects.create(employee_id=employee_id, department=department, user=user, **defaults)


def make_shop(code='SHOP01', latitude=Decimal('9.010000'), longitude=Decimal('38.760000'), stock=None):
    shop = Shop.objects.create(
        code=code,
        name=f"Shop {code}",
        address='Bole Road',
        latitude=latitude,
        longitude=longitude,
    )
    for variant, quantity in (stock or {}).items():
        ShopInventory.objects.create(shop=shop, product_variant_id=variant, stock=quantity)
    return shop


def make_order(order_number='ORD001', status='confirmed', items=None, customer=None,
               latitude=Decimal('9.020000'), longitude=Decimal('38.750000')):
    order = EcommerceOrder.objects.create(
        order_number=order_number,
        customer=customer,
        customer_name='Hanna Bekele',
        customer_email='hanna@example.com',
        delivery_address='Kazanchis, Addis Ababa',
        delivery_latitude=latitude,
        delivery_longitude=longitude,
        status=status,
        total_amount=Decimal('1200.00'),
    )
    for variant, quantity in (items or {}).items():
        OrderItem.objects.create(order=order, product_variant_id=variant, quantity=quantity, unit_price=Decimal('60.00'))
    return order
