import pytest
from django.conf import settings

from apps.accounts.models import User, UserRole
from apps.accounts.tokens import issue_token

pytestmark = pytest.mark.django_db

REGISTER_URL = '/api/auth/register'
LOGIN_URL = '/api/auth/login'


def register(client, **overrides):
    payload = {'email': 'Alice@Example.com', 'password': 'secret123', 'name': 'Alice'}
    payload.update(overrides)
    return client.post(REGISTER_URL, payload, format='json')


class TestRegistration:

    def test_register_creates_tourist_with_lowercased_email(self, api_client):
        response = register(api_client)

        assert response.status_code == 201
        body = response.json()
        assert body['status'] == 'success'
        assert body['message'] == "Registration successful"
        assert body['data']['user']['email'] == 'alice@example.com'
        assert body['data']['user']['role'] == UserRole.TOURIST
        assert 'password' not in body['data']['user']
        assert body['data']['token']
        assert response.cookies[settings.JWT_COOKIE_NAME]['httponly']

    def test_duplicate_email_differing_only_in_case_conflicts(self, api_client):
        register(api_client)

        response = register(api_client, email='ALICE@example.COM')

        assert response.status_code == 409
        assert response.json()['message'] == "User with this email already exists"
        assert User.objects.count() == 1

    def test_admin_role_cannot_be_self_assigned(self, api_client):
        response = register(api_client, role='ADMIN')

        assert response.status_code == 400
        body = response.json()
        assert body['message'] == "Validation failed"
        assert body['errors'][0]['field'] == 'role'

    def test_short_password_is_rejected(self, api_client):
        response = register(api_client, password='123')

        assert response.status_code == 400
        assert any(error['field'] == 'password' for error in response.json()['errors'])


class TestLogin:

    def test_login_is_case_insensitive_on_email(self, api_client, make_user):
        make_user(email='bob@example.com', password='secret123')

        response = api_client.post(LOGIN_URL, {'email': 'BOB@example.com', 'password': 'secret123'}, format='json')

        assert response.status_code == 200
        assert response.json()['message'] == "Login successful"

    @pytest.mark.parametrize('email,password', [
        ('bob@example.com', 'wrong-password'),
        ('nobody@example.com', 'secret123'),
    ])
    def test_failures_share_one_generic_message(self, api_client, make_user, email, password):
        make_user(email='bob@example.com', password='secret123')

        response = api_client.post(LOGIN_URL, {'email': email, 'password': password}, format='json')

        assert response.status_code == 401
        assert response.json()['message'] == "Invalid email or password"

    def test_deactivated_account_cannot_log_in(self, api_client, make_user):
        make_user(email='bob@example.com', password='secret123', is_active=False)

        response = api_client.post(LOGIN_URL, {'email': 'bob@example.com', 'password': 'secret123'}, format='json')

        assert response.status_code == 401
        assert response.json()['message'] == "Invalid email or password"


class TestSession:

    def test_me_requires_a_token(self, api_client):
        response = api_client.get('/api/auth/me')

        assert response.status_code == 401
        assert response.json()['message'] == "Please log in to access this resource"

    def test_me_returns_profile_and_counts(self, client_for, guide, listing):
        response = client_for(guide).get('/api/auth/me')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['id'] == str(guide.id)
        assert data['counts']['listings'] == 1

    def test_token_cookie_is_accepted(self, api_client, tourist):
        api_client.cookies[settings.JWT_COOKIE_NAME] = issue_token(tourist)

        response = api_client.get('/api/auth/me')

        assert response.status_code == 200

    def test_invalid_token_is_rejected(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-jwt')

        response = api_client.get('/api/auth/me')

        assert response.status_code == 401
        assert response.json()['message'] == "Invalid token"

    def test_token_of_deleted_user_is_rejected(self, api_client, make_user):
        user = make_user()
        token = issue_token(user)
        user.delete()
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get('/api/auth/me')

        assert response.status_code == 401
        assert response.json()['message'] == "User no longer exists"

    def test_change_password_checks_current_password(self, client_for, tourist):
        client = client_for(tourist)

        response = client.patch(
            '/api/auth/change-password',
            {'current_password': 'wrong', 'new_password': 'newsecret'},
            format='json',
        )
        assert response.status_code == 401
        assert response.json()['message'] == "Current password is incorrect"

        response = client.patch(
            '/api/auth/change-password',
            {'current_password': 'secret123', 'new_password': 'newsecret'},
            format='json',
        )
        assert response.status_code == 200
        tourist.refresh_from_db()
        assert tourist.check_password('newsecret')

    def test_logout_clears_cookie(self, api_client):
        response = api_client.post('/api/auth/logout')

        assert response.status_code == 200
        assert response.cookies[settings.JWT_COOKIE_NAME].value == ''
