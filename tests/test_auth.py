import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from catalog.models import Category

pytestmark = pytest.mark.django_db


def test_admin_login_returns_tokens_that_authorize_writes(api_client, menu_admin):
    response = api_client.post(reverse('token_obtain_pair'), {
        'username': 'menu-admin',
        'password': 'Secret123!',
    }, format='json')

    assert response.status_code == 200
    assert response.data['user']['username'] == 'menu-admin'

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
    created = client.post(reverse('category-list-create'), {'name': 'Soups'}, format='json')

    assert created.status_code == 201
    assert Category.objects.get().name == 'Soups'


def test_login_rejects_wrong_password(api_client, menu_admin):
    response = api_client.post(reverse('token_obtain_pair'), {
        'username': 'menu-admin',
        'password': 'wrong',
    }, format='json')

    assert response.status_code == 400
    assert 'access' not in response.data


def test_login_rejects_non_staff_users(api_client, django_user_model):
    django_user_model.objects.create_user(username='guest', password='Secret123!')

    response = api_client.post(reverse('token_obtain_pair'), {
        'username': 'guest',
        'password': 'Secret123!',
    }, format='json')

    assert response.status_code == 400


def test_refresh_token_issues_new_access_token(api_client, menu_admin):
    tokens = api_client.post(reverse('token_obtain_pair'), {
        'username': 'menu-admin',
        'password': 'Secret123!',
    }, format='json').data

    response = api_client.post(reverse('token_refresh'), {'refresh': tokens['refresh']}, format='json')

    assert response.status_code == 200
    assert 'access' in response.data


def test_health_check(api_client):
    response = api_client.get(reverse('health_check'))

    assert response.status_code == 200
    assert response.data['database'] == 'connected'
