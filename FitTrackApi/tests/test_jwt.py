from django.test import TestCase
from ninja.testing import TestClient
from ninja.main import NinjaAPI
from accounts.models import Role, User
from ..api import api


class TestJWT(TestCase):
    def setUp(self):
        NinjaAPI._registry.clear()
        self.client = TestClient(api)

    def test_token_pair_endpoint_exists(self):
        response = self.client.get("/token/pair")
        self.assertEqual(response.status_code, 405)
        response = self.client.post("/token/pair", data={})
        self.assertEqual(response.status_code, 400)

    def test_token_pair_success(self):
        User.objects.create_user(email="coach@example.com", password="testpass123", role=Role.STAFF)
        response = self.client.post("/token/pair", json={"email": "coach@example.com", "password": "testpass123"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIn("access", data)
        self.assertIn("refresh", data)

        me = self.client.get("/auth/me", headers={"Authorization": f"Bearer {data['access']}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["role"], "staff")
        self.assertIsNone(me.json()["organization_id"])

    def test_token_pair_invalid_credentials(self):
        User.objects.create_user(email="lifter@example.com", password="testpass123")
        response = self.client.post("/token/pair", json={"email": "lifter@example.com", "password": "wrongpass"})
        self.assertEqual(response.status_code, 401)
        self.assertNotIn("access", response.json())
