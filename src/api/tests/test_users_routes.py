"""Route tests for /users — register, login, me, logout."""

import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from adapter.fake.user_repository import FakeUserRepository
from api.dependencies import get_token_engine, get_user_repo
from api.main import app
from services.auth_service import TokenEngine


class UsersRouteTestCase(unittest.TestCase):

    def setUp(self):
        patcher = patch('services.auth_service.BCRYPT_ROUNDS', 4)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.client = TestClient(app)
        self.user_repo = FakeUserRepository()
        self.engine = TokenEngine('test-secret-key')
        app.dependency_overrides[get_user_repo] = lambda: self.user_repo
        app.dependency_overrides[get_token_engine] = lambda: self.engine

    def tearDown(self):
        app.dependency_overrides.clear()

    def register(self, email='a@x.com', password='abc123!'):
        return self.client.post("/users", json={"email": email, "password": password})


class TestRegister(UsersRouteTestCase):

    def test_register_returns_token_header(self):
        response = self.register()

        self.assertEqual(response.status_code, 200)
        token = response.headers.get('x-auth')
        self.assertTrue(token)
        body = response.json()
        self.assertEqual(body['email'], 'a@x.com')
        self.assertEqual(set(body), {'id', 'email'})

        stored = self.user_repo.get_by_id(body['id'])
        self.assertNotEqual(stored.password_hash, 'abc123!')
        self.assertTrue(stored.has_token(token))

    def test_register_invalid_email(self):
        response = self.register(email='not-an-email')

        self.assertEqual(response.status_code, 400)
        self.assertNotIn('x-auth', response.headers)
        self.assertEqual(self.user_repo.store, {})

    def test_register_short_password(self):
        response = self.register(password='12345')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.user_repo.store, {})

    def test_register_duplicate_email(self):
        self.register()
        response = self.register()

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.user_repo.store), 1)

    def test_register_missing_fields(self):
        response = self.client.post("/users", json={"email": "a@x.com"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'][0]['loc'], ['body', 'password'])
        self.assertEqual(self.user_repo.store, {})

    def test_register_password_over_bcrypt_limit(self):
        response = self.register(password='p' * 80)

        self.assertEqual(response.status_code, 400)
        self.assertNotIn('x-auth', response.headers)
        self.assertEqual(self.user_repo.store, {})

    def test_validation_errors_do_not_echo_input(self):
        response = self.client.post("/users", json={"email": "a@x.com", "password": ["abc123!"]})

        self.assertEqual(response.status_code, 400)
        self.assertNotIn('abc123!', response.text)


class TestLogin(UsersRouteTestCase):

    def setUp(self):
        super().setUp()
        self.user_id = self.register().json()['id']

    def test_login_returns_new_token(self):
        response = self.client.post("/users/login", json={"email": "a@x.com", "password": "abc123!"})

        self.assertEqual(response.status_code, 200)
        token = response.headers['x-auth']
        self.assertEqual(response.json()['id'], self.user_id)
        stored = self.user_repo.get_by_id(self.user_id)
        self.assertEqual(len(stored.tokens), 2)
        self.assertTrue(stored.has_token(token))

    def test_login_wrong_password(self):
        response = self.client.post("/users/login", json={"email": "a@x.com", "password": "wrong!!"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Invalid email or password')
        self.assertNotIn('x-auth', response.headers)
        self.assertEqual(len(self.user_repo.get_by_id(self.user_id).tokens), 1)

    def test_login_unknown_email(self):
        response = self.client.post("/users/login", json={"email": "b@x.com", "password": "abc123!"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Invalid email or password')


class TestMeAndLogout(UsersRouteTestCase):

    def setUp(self):
        super().setUp()
        self.token = self.register().headers['x-auth']

    def test_me_returns_user(self):
        response = self.client.get("/users/me", headers={"x-auth": self.token})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['email'], 'a@x.com')

    def test_me_without_token(self):
        response = self.client.get("/users/me")
        self.assertEqual(response.status_code, 401)

    def test_me_with_garbage_token(self):
        response = self.client.get("/users/me", headers={"x-auth": "garbage"})
        self.assertEqual(response.status_code, 401)

    def test_logout_revokes_only_presented_token(self):
        other = self.client.post(
            "/users/login", json={"email": "a@x.com", "password": "abc123!"}
        ).headers['x-auth']

        response = self.client.delete("/users/me/token", headers={"x-auth": self.token})
        self.assertEqual(response.status_code, 200)

        self.assertEqual(self.client.get("/users/me", headers={"x-auth": self.token}).status_code, 401)
        self.assertEqual(self.client.get("/users/me", headers={"x-auth": other}).status_code, 200)

    def test_logout_twice_is_unauthenticated(self):
        self.client.delete("/users/me/token", headers={"x-auth": self.token})
        response = self.client.delete("/users/me/token", headers={"x-auth": self.token})

        self.assertEqual(response.status_code, 401)


if __name__ == '__main__':
    unittest.main()
