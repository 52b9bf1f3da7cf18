"""
Fixtures compartidos: usuarios, cliente autenticado y fábricas de agencias/contactos.
"""
from datetime import datetime, timezone as dt_timezone

import pytest
from django.contrib.auth import get_user_model

from directory.models import Agency, Contact


@pytest.fixture
def user(db):
    User = get_user_model()
    return User.objects.create_user(email='analyst@example.com', password='s3cret-pass')


@pytest.fixture
def auth_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def now():
    return datetime(2024, 1, 1, 15, 30, tzinfo=dt_timezone.utc)


@pytest.fixture
def make_contacts(db):
    """Crea `n` contactos alcanzables (con email) con apellidos ordenables."""

    def _make(n, prefix='c', agency=None):
        contacts = [
            Contact(
                id=f'{prefix}{i:04d}',
                first_name=f'First{i:04d}',
                last_name=f'Last{i:04d}',
                email=f'{prefix}{i}@agency.gov',
                agency=agency,
            )
            for i in range(n)
        ]
        return Contact.objects.bulk_create(contacts)

    return _make


@pytest.fixture
def agency(db):
    return Agency.objects.create(id='ag-1', name='Springfield Water Dept', state='IL', population=30720)
