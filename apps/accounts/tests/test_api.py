from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import User, Role
from apps.payments.models import Payment, PaymentStatus
from apps.properties.models import Property, Room
from apps.tenants.models import Tenant


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('accounts:register')
        data = {
            'email': 'newuser@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'name': 'New User',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert response.data['user']['role'] == Role.USER
        assert User.objects.filter(email='newuser@example.com').exists()

    def test_register_cannot_request_admin_role(self, api_client):
        """Self-registration always yields a USER."""
        url = reverse('accounts:register')
        data = {
            'email': 'sneaky@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'role': 'ADMIN',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='sneaky@example.com').role == Role.USER

    def test_register_duplicate_email(self, api_client, user):
        """Cannot register with an existing email, whatever its case."""
        url = reverse('accounts:register')
        data = {
            'email': user.email.upper(),
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'An account with this email already exists.'}

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('accounts:register')
        data = {
            'email': 'mismatch@example.com',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid input'
        assert 'password_confirm' in response.data['details']

    def test_register_weak_password(self, api_client):
        url = reverse('accounts:register')
        data = {
            'email': 'weak@example.com',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password' in response.data['details']


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_is_case_insensitive_on_email(self, api_client, user):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': 'Landlord@Example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK

    def test_login_updates_last_login(self, api_client, user):
        assert user.last_login is None
        api_client.post(reverse('accounts:login'), {'email': user.email, 'password': 'TestPass123!'})

        user.refresh_from_db()
        assert user.last_login is not None

    def test_login_wrong_password(self, api_client, user):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_unknown_email(self, api_client, db):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': 'nobody@example.com', 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_account(self, api_client, user_inactive):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_login_missing_fields(self, api_client, db):
        response = api_client.post(reverse('accounts:login'), {})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert set(response.data['details']) == {'email', 'password'}


# =============================================================================
# Current User / Tokens
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/me/"""

    def test_current_user(self, make_client, user):
        response = make_client(user).get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['role'] == Role.USER

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('accounts:current-user'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert 'error' in response.data

    def test_refresh_token(self, api_client, user):
        login = api_client.post(reverse('accounts:login'), {'email': user.email, 'password': 'TestPass123!'})
        response = api_client.post(
            reverse('token_refresh'),
            {'refresh': login.data['tokens']['refresh']},
        )

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data


# =============================================================================
# Admin account command
# =============================================================================

@pytest.mark.django_db
class TestCreateAdminCommand:

    def test_creates_admin(self):
        call_command('create_admin', email='boss@example.com', password='BossPass123!')

        admin = User.objects.get(email='boss@example.com')
        assert admin.is_admin
        assert admin.is_staff
        assert admin.check_password('BossPass123!')

    def test_existing_account_is_not_promoted(self, user):
        with pytest.raises(CommandError, match='already exists'):
            call_command('create_admin', email=user.email.upper(), password='NewPass123!')

        user.refresh_from_db()
        assert user.role == Role.USER
        assert not user.is_staff
        assert user.check_password('TestPass123!')
        assert User.objects.filter(email__iexact=user.email).count() == 1


@pytest.mark.django_db
class TestCreateSampleDataCommand:

    def test_seeds_consistent_data(self):
        call_command('create_sample_data', stdout=StringIO())

        assert Property.objects.count() == 2
        sunshine = Property.objects.get(name='Sunshine Apartments')
        assert sunshine.occupied_rooms == 1
        assert sunshine.rooms.get(room_number='102').is_available is False
        assert set(Payment.objects.values_list('status', flat=True)) == {
            PaymentStatus.PAID, PaymentStatus.WAITING_APPROVAL,
        }

    def test_rerun_is_idempotent(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', stdout=StringIO())

        assert Tenant.objects.count() == 2

    def test_clear(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert Room.objects.count() == 5
