import pytest


@pytest.fixture
def user(landlord):
    """A plain USER account. Landlords and tenants share this role."""
    return landlord


@pytest.fixture
def user_inactive(tenant_user):
    tenant_user.is_active = False
    tenant_user.save(update_fields=['is_active'])
    return tenant_user
