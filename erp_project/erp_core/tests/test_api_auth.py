from erp_core.models import Tenant, User
from erp_core.tests.helpers import ApiTestCase
from erp_core.tokens import verify_token


class LoginRegisterTests(ApiTestCase):

    def _login(self, **data):
        return self.client.post(
            "/api/auth/login", data, content_type="application/json")

    def test_login_returns_token_and_user(self):
        response = self._login(
            tenant_id=self.tenant.pk, email="owner@acme.test", password="secret")

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"]["email"], "owner@acme.test")
        self.assertNotIn("password", body["user"])
        claims = verify_token(body["token"])
        self.assertEqual(claims["tenant_id"], self.tenant.pk)
        self.assertEqual(claims["user_id"], self.user.pk)

    def test_login_with_wrong_password_is_unauthorized(self):
        response = self._login(
            tenant_id=self.tenant.pk, email="owner@acme.test", password="nope")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Invalid credentials"})

    def test_login_against_other_tenant_is_unauthorized(self):
        other = Tenant.objects.create(name="Other", subdomain="other")
        response = self._login(
            tenant_id=other.pk, email="owner@acme.test", password="secret")
        self.assertEqual(response.status_code, 401)

    def test_login_requires_all_fields(self):
        response = self._login(email="owner@acme.test", password="secret")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "Tenant ID, email and password are required"})

    def test_malformed_body_is_bad_request(self):
        response = self.client.post(
            "/api/auth/login", "{not json", content_type="application/json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Invalid request payload"})

    def test_register_creates_user_and_returns_token(self):
        response = self.client.post("/api/auth/register", {
            "tenant_id": self.tenant.pk,
            "email": "new@acme.test",
            "password": "pw123",
            "first_name": "New",
        }, content_type="application/json")

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["user"]["role"], "user")
        user = User.objects.get_by_email(self.tenant, "new@acme.test")
        self.assertTrue(user.check_password("pw123"))
        self.assertNotEqual(user.password, "pw123")

    def test_register_duplicate_is_conflict(self):
        response = self.client.post("/api/auth/register", {
            "tenant_id": self.tenant.pk,
            "email": "owner@acme.test",
            "password": "pw",
        }, content_type="application/json")
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json(), {"error": "User already exists"})

    def test_register_for_unknown_tenant_is_not_found(self):
        response = self.client.post("/api/auth/register", {
            "tenant_id": 424242, "email": "x@y.test", "password": "pw",
        }, content_type="application/json")
        self.assertEqual(response.status_code, 404)

    def test_login_rejects_get(self):
        self.assertEqual(self.client.get("/api/auth/login").status_code, 405)


class TenantApiTests(ApiTestCase):

    def test_public_lookup_by_subdomain(self):
        response = self.client.get("/api/tenants/acme")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], self.tenant.pk)

        self.assertEqual(self.client.get("/api/tenants/nobody").status_code, 404)

    def test_create_update_delete_tenant(self):
        response = self.post("/api/admin/tenants",
                             {"name": "Beta", "subdomain": "beta"})
        self.assertEqual(response.status_code, 201)
        tenant_id = response.json()["id"]

        response = self.put(f"/api/admin/tenants/{tenant_id}",
                            {"name": "Beta Ltd", "subdomain": "beta-ltd"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["subdomain"], "beta-ltd")

        response = self.delete(f"/api/admin/tenants/{tenant_id}")
        self.assertEqual(response.json(), {"message": "Tenant deleted successfully"})
        self.assertEqual(self.get(f"/api/admin/tenants/{tenant_id}").status_code, 404)

    def test_duplicate_subdomain_is_conflict(self):
        response = self.post("/api/admin/tenants",
                             {"name": "Copy", "subdomain": "acme"})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(
            response.json(), {"error": "Tenant with this subdomain already exists"})

    def test_create_requires_name_and_subdomain(self):
        response = self.post("/api/admin/tenants", {"name": "No sub"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Name and subdomain are required"})


class UserApiTests(ApiTestCase):

    def test_create_and_list_users_in_caller_tenant(self):
        response = self.post("/api/users", {
            "email": "clerk@acme.test", "password": "pw", "role": "accountant"})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["tenant_id"], self.tenant.pk)

        emails = [u["email"] for u in self.get("/api/users").json()]
        self.assertEqual(emails, ["clerk@acme.test", "owner@acme.test"])

    def test_duplicate_email_is_conflict(self):
        response = self.post("/api/users",
                             {"email": "owner@acme.test", "password": "pw"})
        self.assertEqual(response.status_code, 409)

    def test_update_changes_password_only_when_given(self):
        url = f"/api/users/{self.user.pk}"
        response = self.put(url, {"email": "owner@acme.test", "first_name": "Ann"})
        self.assertEqual(response.status_code, 200)
        self.user.refresh_from_db()
        self.assertEqual(self.user.first_name, "Ann")
        self.assertTrue(self.user.check_password("secret"))

        self.put(url, {"email": "owner@acme.test", "password": "fresh"})
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("fresh"))

    def test_update_requires_email(self):
        response = self.put(f"/api/users/{self.user.pk}", {"first_name": "X"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Email is required"})

    def test_delete_user(self):
        clerk = User.objects.create_user(self.tenant, "clerk@acme.test", "pw")
        response = self.delete(f"/api/users/{clerk.pk}")
        self.assertEqual(response.json(), {"message": "User deleted successfully"})
        self.assertEqual(self.delete(f"/api/users/{clerk.pk}").status_code, 404)
