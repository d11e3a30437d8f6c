import pytest
from django.urls import reverse
from rest_framework import status


@pytest.mark.django_db
class TestUserAdmin:

    def test_role_is_read_only_on_change(self, site_admin_client, user):
        response = site_admin_client.get(reverse('admin:accounts_user_change', args=[user.id]))

        assert response.status_code == status.HTTP_200_OK
        assert 'role' not in response.context['adminform'].form.fields

    def test_role_is_chosen_on_add(self, site_admin_client):
        response = site_admin_client.get(reverse('admin:accounts_user_add'))

        assert response.status_code == status.HTTP_200_OK
        assert 'role' in response.context['adminform'].form.fields

    def test_no_promote_action(self, site_admin_client, user):
        response = site_admin_client.get(reverse('admin:accounts_user_changelist'))

        assert response.status_code == status.HTTP_200_OK
        assert b'make_admin' not in response.content
