from erp_core.models import Contact, Customer, Interaction
from erp_core.tests.helpers import ApiTestCase


class CustomerApiTests(ApiTestCase):

    def test_customer_crud_with_embedded_contacts(self):
        response = self.post("/api/crm/customers", {
            "name": "Globex", "email": "hi@globex.test"})
        self.assertEqual(response.status_code, 201)
        customer_id = response.json()["id"]
        # list view does not embed contacts
        self.assertNotIn("contacts", response.json())

        self.post("/api/crm/contacts", {
            "customer_id": customer_id, "first_name": "Hank", "last_name": "Scorpio"})

        detail = self.get(f"/api/crm/customers/{customer_id}").json()
        self.assertEqual([c["last_name"] for c in detail["contacts"]], ["Scorpio"])

        response = self.put(f"/api/crm/customers/{customer_id}", {
            "name": "Globex Corp", "phone": "555"})
        self.assertEqual(response.json()["name"], "Globex Corp")

    def test_name_is_required(self):
        response = self.post("/api/crm/customers", {"email": "x@y.test"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Name is required"})

    def test_delete_cascades_to_contacts_and_interactions(self):
        customer = Customer.objects.create(tenant=self.tenant, name="Initech")
        contact = Contact.objects.create(
            tenant=self.tenant, customer=customer, first_name="Bill", last_name="L")
        self.post("/api/crm/interactions", {
            "customer_id": customer.pk, "contact_id": contact.pk,
            "interaction_type": "call", "interaction_date": "2025-03-01T10:00:00Z"})

        response = self.delete(f"/api/crm/customers/{customer.pk}")

        self.assertEqual(response.json(), {"message": "Customer deleted successfully"})
        self.assertFalse(Contact.objects.filter(pk=contact.pk).exists())
        self.assertFalse(Interaction.objects.exists())


class ContactApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.customer = Customer.objects.create(tenant=self.tenant, name="Acme Retail")

    def test_contacts_by_customer_sorted_by_name(self):
        for first, last in (("Zed", "Young"), ("Amy", "Adams"), ("Bob", "Adams")):
            self.post("/api/crm/contacts", {
                "customer_id": self.customer.pk, "first_name": first,
                "last_name": last})

        listed = self.get(f"/api/crm/customers/{self.customer.pk}/contacts").json()

        self.assertEqual([(c["last_name"], c["first_name"]) for c in listed],
                         [("Adams", "Amy"), ("Adams", "Bob"), ("Young", "Zed")])

    def test_contact_requires_fields_and_known_customer(self):
        response = self.post("/api/crm/contacts", {"first_name": "A"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"error": "Customer ID, first name and last name are required"})

        response = self.post("/api/crm/contacts", {
            "customer_id": 99999, "first_name": "A", "last_name": "B"})
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"error": "Customer not found"})

    def test_update_and_delete_contact(self):
        contact_id = self.post("/api/crm/contacts", {
            "customer_id": self.customer.pk, "first_name": "A",
            "last_name": "B"}).json()["id"]

        response = self.put(f"/api/crm/contacts/{contact_id}", {
            "customer_id": self.customer.pk, "first_name": "A",
            "last_name": "B", "position": "CFO"})
        self.assertEqual(response.json()["position"], "CFO")

        response = self.delete(f"/api/crm/contacts/{contact_id}")
        self.assertEqual(response.json(), {"message": "Contact deleted successfully"})


class InteractionApiTests(ApiTestCase):

    def setUp(self):
        super().setUp()
        self.customer = Customer.objects.create(tenant=self.tenant, name="Acme Retail")
        self.contact = Contact.objects.create(
            tenant=self.tenant, customer=self.customer,
            first_name="Jane", last_name="Doe")

    def _log(self, **overrides):
        payload = {
            "customer_id": self.customer.pk,
            "contact_id": self.contact.pk,
            "interaction_type": "meeting",
            "interaction_date": "2025-03-01T10:00:00Z",
            "description": "Quarterly review",
        }
        payload.update(overrides)
        return self.post("/api/crm/interactions", payload)

    def test_create_and_list_newest_first(self):
        first = self._log(interaction_date="2025-03-01T10:00:00Z")
        self.assertEqual(first.status_code, 201)
        self.assertEqual(first.json()["created_by"], self.user.pk)
        second = self._log(interaction_date="2025-04-01T10:00:00Z")

        listed = self.get(
            f"/api/crm/customers/{self.customer.pk}/interactions").json()

        self.assertEqual([i["id"] for i in listed],
                         [second.json()["id"], first.json()["id"]])

    def test_contact_must_belong_to_customer(self):
        elsewhere = Customer.objects.create(tenant=self.tenant, name="Elsewhere")
        stranger = Contact.objects.create(
            tenant=self.tenant, customer=elsewhere, first_name="S", last_name="T")

        response = self._log(contact_id=stranger.pk)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(), {"error": "Contact does not belong to this customer"})

    def test_required_fields(self):
        response = self._log(interaction_type="")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"error": "Customer ID, interaction type and date are required"})

    def test_contact_is_optional_and_update_replaces_fields(self):
        created = self._log(contact_id=None).json()
        self.assertIsNone(created["contact_id"])

        response = self.put(f"/api/crm/interactions/{created['id']}", {
            "customer_id": self.customer.pk, "interaction_type": "email",
            "interaction_date": "2025-05-01"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["interaction_type"], "email")
        self.assertTrue(response.json()["interaction_date"].startswith("2025-05-01"))

        response = self.delete(f"/api/crm/interactions/{created['id']}")
        self.assertEqual(response.json(),
                         {"message": "Interaction deleted successfully"})
