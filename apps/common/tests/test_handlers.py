import logging

import pytest
from django.http import Http404
from django.urls import reverse
from rest_framework import exceptions, status
from rest_framework.test import APIRequestFactory

from apps.common.exceptions import (
    ForbiddenError,
    ResourceNotFoundError,
    RoomUnavailableError,
    InvalidTransitionError,
    BusinessRuleError,
)
from apps.common.handlers import api_exception_handler, GENERIC_ERROR


def handle(exc):
    request = APIRequestFactory().get('/')
    return api_exception_handler(exc, {'view': None, 'request': request})


class TestExceptionTaxonomy:

    def test_status_codes(self):
        assert ForbiddenError.status_code == 403
        assert ResourceNotFoundError.status_code == 404
        assert RoomUnavailableError.status_code == 400
        assert InvalidTransitionError.status_code == 400

    def test_business_rule_family(self):
        assert issubclass(RoomUnavailableError, BusinessRuleError)
        assert issubclass(InvalidTransitionError, BusinessRuleError)


class TestApiExceptionHandler:

    def test_domain_error_body(self):
        response = handle(RoomUnavailableError())

        assert response.status_code == 400
        assert response.data == {'error': 'Room is not available.'}

    def test_custom_message(self):
        response = handle(ForbiddenError('You do not own this property.'))

        assert response.status_code == 403
        assert response.data == {'error': 'You do not own this property.'}

    def test_field_errors_keep_details(self):
        response = handle(exceptions.ValidationError({'name': ['This field is required.']}))

        assert response.status_code == 400
        assert response.data['error'] == 'Invalid input'
        assert response.data['details'] == {'name': ['This field is required.']}

    def test_single_message_validation_error(self):
        response = handle(exceptions.ValidationError('Lease is too short.'))

        assert response.data == {'error': 'Lease is too short.'}

    def test_django_404(self):
        response = handle(Http404())

        assert response.status_code == 404
        assert 'error' in response.data

    @pytest.mark.django_db
    def test_unexpected_error_is_generic_500(self, caplog):
        with caplog.at_level(logging.ERROR, logger='apps.common'):
            response = handle(RuntimeError('database exploded'))

        assert response.status_code == 500
        assert response.data == {'error': GENERIC_ERROR}
        assert 'database exploded' not in str(response.data)
        assert any('database exploded' in r.getMessage() for r in caplog.records)

    def test_refusals_are_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger='apps.common'):
            handle(InvalidTransitionError('Cannot approve a payment that is PAID.'))

        assert any('Cannot approve' in r.getMessage() for r in caplog.records)


@pytest.mark.django_db
class TestProjectViews:

    def test_health_check(self, api_client):
        response = api_client.get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['status'] == 'healthy'

    def test_request_id_header(self, api_client):
        response = api_client.get(reverse('health-check'))
        assert len(response['X-Request-ID']) == 8

    def test_schema_available(self, api_client):
        response = api_client.get(reverse('api-schema'))
        assert response.status_code == status.HTTP_200_OK

    def test_plain_http_is_not_redirected(self, api_client, settings):
        assert settings.SECURE_SSL_REDIRECT is False

        response = api_client.get(reverse('health-check'), secure=False)
        assert response.status_code == status.HTTP_200_OK
