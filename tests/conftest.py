"""
Test configuration for the jewel store server.
"""
import os

import pytest


def pytest_configure():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'jewel_server.settings')
    os.environ.setdefault('ENVIRONMENT', 'test')


@pytest.fixture
def api_client():
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def customer():
    from tests.factories import UserFactory
    return UserFactory()


@pytest.fixture
def admin_user():
    from tests.factories import AdminFactory
    return AdminFactory()


@pytest.fixture
def agent():
    from tests.factories import DeliveryAgentFactory
    return DeliveryAgentFactory(service_area='Bangalore', service_pincodes=['560001'])


@pytest.fixture
def recording_notifier():
    from tests.notifiers import RecordingNotifier
    return RecordingNotifier()
