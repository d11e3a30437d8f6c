from io import StringIO

import pytest
from django.core.management import call_command
from django.urls import reverse
from rest_framework import status
from apps.properties.models import Room
from apps.tenants.models import Tenant


def tenant_data(prop, room, **overrides):
    data = {
        'property_id': str(prop.id),
        'room_id': str(room.id),
        'name': 'Ravi Kumar',
        'email': 'ravi@example.com',
        'phone': '+91 90000 00000',
        'lease_start': '2025-04-01',
        'lease_end': '2026-03-31',
        'rent_amount': '8000.00',
    }
    data.update(overrides)
    return data


@pytest.mark.django_db
class TestTenantEndpoints:
    """Tests for /api/tenants/"""

    def test_assign_tenant(self, landlord_client, prop, room):
        response = landlord_client.post(reverse('tenants:tenant-list'), tenant_data(prop, room))

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['room']['id'] == str(room.id)
        assert response.data['property'] == {'id': str(prop.id), 'name': prop.name}
        room.refresh_from_db()
        prop.refresh_from_db()
        assert room.is_available is False
        assert prop.occupied_rooms == 1

    def test_assign_to_occupied_room(self, landlord_client, prop, room, tenant):
        response = landlord_client.post(reverse('tenants:tenant-list'), tenant_data(prop, room))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Room is not available.'}
        assert Tenant.objects.count() == 1

    def test_assign_in_foreign_property(self, other_landlord_client, prop, room):
        response = other_landlord_client.post(reverse('tenants:tenant-list'), tenant_data(prop, room))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Tenant.objects.exists()

    def test_assign_room_of_other_property(self, landlord_client, prop, other_room):
        response = landlord_client.post(
            reverse('tenants:tenant-list'),
            tenant_data(prop, other_room),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'room_id' in response.data['details']

    def test_assign_bad_lease(self, landlord_client, prop, room):
        response = landlord_client.post(
            reverse('tenants:tenant-list'),
            tenant_data(prop, room, lease_end='2025-01-01'),
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'lease_end' in response.data['details']
        room.refresh_from_db()
        assert room.is_available is True

    def test_list_only_managed_tenants(self, landlord_client, other_landlord_client, tenant):
        mine = landlord_client.get(reverse('tenants:tenant-list'))
        theirs = other_landlord_client.get(reverse('tenants:tenant-list'))

        assert mine.data['count'] == 1
        assert theirs.data['count'] == 0

    def test_retrieve_foreign_tenant(self, other_landlord_client, tenant):
        response = other_landlord_client.get(reverse('tenants:tenant-detail', args=[tenant.id]))
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_move_tenant(self, landlord_client, prop, room, second_room, tenant):
        url = reverse('tenants:tenant-detail', args=[tenant.id])
        response = landlord_client.patch(url, {'room_id': str(second_room.id)})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['room']['id'] == str(second_room.id)
        assert Room.objects.get(id=room.id).is_available is True
        assert Room.objects.get(id=second_room.id).is_available is False

    def test_release_tenant(self, landlord_client, prop, room, tenant):
        response = landlord_client.delete(reverse('tenants:tenant-detail', args=[tenant.id]))

        assert response.status_code == status.HTTP_204_NO_CONTENT
        room.refresh_from_db()
        prop.refresh_from_db()
        assert room.is_available is True
        assert prop.occupied_rooms == 0

    def test_release_by_other_landlord(self, other_landlord_client, room, tenant):
        response = other_landlord_client.delete(reverse('tenants:tenant-detail', args=[tenant.id]))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert Tenant.objects.filter(id=tenant.id).exists()

    def test_me_lists_own_tenancies(self, tenant_client, tenant):
        response = tenant_client.get(reverse('tenants:tenant-me'))

        assert response.status_code == status.HTTP_200_OK
        assert [t['id'] for t in response.data] == [str(tenant.id)]

    def test_me_empty_for_non_tenant(self, other_landlord_client, tenant):
        response = other_landlord_client.get(reverse('tenants:tenant-me'))
        assert response.data == []


@pytest.mark.django_db
class TestSyncRoomAvailabilityCommand:

    def test_reports_and_repairs(self, room, tenant):
        Room.objects.filter(id=room.id).update(is_available=True)
        out = StringIO()

        call_command('sync_room_availability', stdout=out)

        room.refresh_from_db()
        assert room.is_available is False
        assert 'Marked 1 room(s) occupied' in out.getvalue()

    def test_dry_run(self, room, tenant):
        Room.objects.filter(id=room.id).update(is_available=True)
        out = StringIO()

        call_command('sync_room_availability', '--dry-run', stdout=out)

        room.refresh_from_db()
        assert room.is_available is True
        assert 'Dry run' in out.getvalue()
