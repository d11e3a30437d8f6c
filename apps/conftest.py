"""Fixtures shared by every app: accounts, JWT clients and a small rental."""
from datetime import date
from decimal import Decimal

import pytest
from django.test import Client
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.models import User, Role
from apps.properties.models import Property, Room, RoomType
from apps.tenants.services import assign_tenant


def client_for(user):
    """Return a fresh API client authenticated as ``user`` with a JWT."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def make_client():
    """Factory fixture: ``make_client(user)`` gives a JWT-authenticated client."""
    return client_for


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def landlord(db):
    return User.objects.create_user(
        email='landlord@example.com',
        password='TestPass123!',
        name='Lara Landlord',
    )


@pytest.fixture
def other_landlord(db):
    return User.objects.create_user(
        email='other.landlord@example.com',
        password='TestPass123!',
        name='Otto Other',
    )


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email='admin@example.com',
        password='TestPass123!',
        name='Admin',
        role=Role.ADMIN,
    )


@pytest.fixture
def tenant_user(db):
    """Login of the person living in ``room``; linked to the tenant by email."""
    return User.objects.create_user(
        email='tina.tenant@example.com',
        password='TestPass123!',
        name='Tina Tenant',
    )


@pytest.fixture
def landlord_client(landlord):
    return client_for(landlord)


@pytest.fixture
def other_landlord_client(other_landlord):
    return client_for(other_landlord)


@pytest.fixture
def admin_client(admin_user):
    return client_for(admin_user)


@pytest.fixture
def tenant_client(tenant_user):
    return client_for(tenant_user)


@pytest.fixture
def site_admin_client(db):
    """Django test client logged in to the admin site as a superuser."""
    superuser = User.objects.create_superuser(
        email='root@example.com',
        password='TestPass123!',
        name='Root',
    )
    client = Client()
    client.force_login(superuser)
    return client


@pytest.fixture
def prop(landlord):
    return Property.objects.create(
        owner=landlord,
        name='Sunshine Apartments',
        address='123 Main Street',
        city='Pune',
        state='MH',
        zip_code='411001',
        total_rooms=3,
        upi_id='sunshine@okbank',
    )


@pytest.fixture
def other_prop(other_landlord):
    return Property.objects.create(
        owner=other_landlord,
        name='Green Valley Residency',
        address='456 Park Avenue',
        city='Mumbai',
        state='MH',
        zip_code='400001',
        total_rooms=2,
    )


@pytest.fixture
def room(prop):
    return Room.objects.create(
        property=prop,
        room_number='101',
        floor='1',
        type=RoomType.SINGLE,
        capacity=1,
        price=Decimal('5000.00'),
    )


@pytest.fixture
def second_room(prop):
    return Room.objects.create(
        property=prop,
        room_number='102',
        floor='1',
        type=RoomType.DOUBLE,
        capacity=2,
        price=Decimal('8000.00'),
    )


@pytest.fixture
def other_room(other_prop):
    return Room.objects.create(
        property=other_prop,
        room_number='301',
        floor='3',
        type=RoomType.SUITE,
        capacity=3,
        price=Decimal('12000.00'),
    )


@pytest.fixture
def tenant(landlord, prop, room, tenant_user):
    """Tenant placed in ``room`` through the occupancy service."""
    return assign_tenant(
        caller=landlord,
        property_id=prop.id,
        room_id=room.id,
        name='Tina Tenant',
        email=tenant_user.email,
        phone='+91 98765 43210',
        lease_start=date(2025, 1, 1),
        lease_end=date(2026, 12, 31),
        rent_amount=Decimal('5000.00'),
    )
