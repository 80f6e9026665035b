"""Component tests for the template endpoints."""

from django.test import Client, TestCase

from tests.factories import create_template

BASE_URL = "/api/v1/notification-engine/templates"


class TestTemplateEndpoints(TestCase):
    """GET/POST /templates and GET /templates/<id>."""

    def setUp(self):
        """Set up test fixtures."""
        self.client = Client()

    def test_create_template(self):
        """Test registering a localized template."""
        response = self.client.post(
            BASE_URL,
            {
                "templateId": "prototype-feedback",
                "name": "Prototype feedback",
                "type": "prototype",
                "title": "New feedback on {{prototype}}",
                "body": "{{reviewer}} left a comment",
                "expiryHours": 48,
                "localization": {
                    "es": {"title": "Comentario", "body": "{{reviewer}} comentó"}
                },
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["template_id"], "prototype-feedback")

    def test_duplicate_template_id_is_400(self):
        """Test template IDs are unique."""
        create_template(template_id="taken")

        response = self.client.post(
            BASE_URL,
            {
                "templateId": "taken",
                "name": "n",
                "type": "system",
                "title": "t",
                "body": "b",
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_incomplete_localization_is_400(self):
        """Test every locale needs a title and a body."""
        response = self.client.post(
            BASE_URL,
            {
                "templateId": "t1",
                "name": "n",
                "type": "system",
                "title": "t",
                "body": "b",
                "localization": {"fr": {"title": "Bonjour"}},
            },
            content_type="application/json",
        )

        self.assertEqual(response.status_code, 400)

    def test_list_by_type_returns_active_templates(self):
        """Test inactive and other-type templates are left out."""
        create_template(template_id="a", type="community")
        create_template(template_id="b", type="community", is_active=False)
        create_template(template_id="c", type="system")

        response = self.client.get(BASE_URL, {"type": "community"})

        self.assertEqual(response.status_code, 200)
        ids = [t["template_id"] for t in response.json()["templates"]]
        self.assertEqual(ids, ["a"])

    def test_list_requires_type(self):
        """Test the type parameter is mandatory."""
        response = self.client.get(BASE_URL)

        self.assertEqual(response.status_code, 400)

    def test_get_template(self):
        """Test retrieval and 404."""
        create_template(template_id="welcome")

        self.assertEqual(self.client.get(f"{BASE_URL}/welcome").status_code, 200)
        self.assertEqual(self.client.get(f"{BASE_URL}/missing").status_code, 404)
