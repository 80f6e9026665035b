"""Tests for placeholder rendering."""

from django.test import SimpleTestCase

from core.models import NotificationTemplate
from core.services.renderer import render, render_text


class TestRenderText(SimpleTestCase):
    """Test suite for render_text."""

    def test_replaces_every_occurrence(self):
        """Test that repeated tokens are all replaced."""
        result = render_text("{{name}} and {{name}}", {"name": "Alice"})
        self.assertEqual(result, "Alice and Alice")

    def test_unknown_tokens_left_verbatim(self):
        """Test that tokens without a value stay as written."""
        result = render_text("Hi {{name}}, see {{link}}", {"name": "Alice"})
        self.assertEqual(result, "Hi Alice, see {{link}}")

    def test_values_are_stringified(self):
        """Test that non-string values are converted with str()."""
        result = render_text("{{count}} new messages", {"count": 3})
        self.assertEqual(result, "3 new messages")

    def test_rendering_is_idempotent(self):
        """Test that rendering an already rendered text changes nothing."""
        placeholders = {"name": "Alice"}
        once = render_text("Hi {{name}} {{other}}", placeholders)
        self.assertEqual(render_text(once, placeholders), once)

    def test_single_braces_are_not_tokens(self):
        """Test that {name} is not treated as a placeholder."""
        self.assertEqual(render_text("{name}", {"name": "Alice"}), "{name}")

    def test_dotted_and_hyphenated_keys(self):
        """Test keys containing dots and hyphens are substituted."""
        template = NotificationTemplate(
            template_id="t2", title="Hi {{user.name}}", body="{{first-name}} x"
        )

        content = render(template, {"user.name": "Alice", "first-name": "Bob"})

        self.assertEqual(content.title, "Hi Alice")
        self.assertEqual(content.body, "Bob x")

    def test_unknown_dotted_key_left_verbatim(self):
        """Test a dotted token without a value stays as written."""
        result = render_text("Hi {{user.name}}", {"user": "Alice"})
        self.assertEqual(result, "Hi {{user.name}}")

    def test_braces_around_a_token(self):
        """Test that extra braces surround the substituted value."""
        self.assertEqual(render_text("{{{name}}}", {"name": "Alice"}), "{Alice}")


class TestRender(SimpleTestCase):
    """Test suite for render over a template."""

    def setUp(self):
        """Set up an unsaved template."""
        self.template = NotificationTemplate(
            template_id="t1",
            title="Hi {{name}}",
            body="Your session with {{mentor}} starts soon",
            localization={
                "es": {
                    "title": "Hola {{name}}",
                    "body": "Tu sesión con {{mentor}} empieza pronto",
                }
            },
        )

    def test_renders_title_and_body(self):
        """Test the default language rendering."""
        content = render(self.template, {"name": "Alice", "mentor": "Bob"})

        self.assertEqual(content.title, "Hi Alice")
        self.assertEqual(content.body, "Your session with Bob starts soon")

    def test_uses_localized_text_when_available(self):
        """Test that a known locale selects the localized title and body."""
        content = render(self.template, {"name": "Ana", "mentor": "Luis"}, locale="es")

        self.assertEqual(content.title, "Hola Ana")
        self.assertEqual(content.body, "Tu sesión con Luis empieza pronto")

    def test_unknown_locale_falls_back_to_default(self):
        """Test that an unknown locale renders the default text."""
        content = render(self.template, {"name": "Alice"}, locale="fr")

        self.assertEqual(content.title, "Hi Alice")

    def test_surrounding_whitespace_is_preserved(self):
        """Test that rendered text is not stripped."""
        self.template.body = "  {{name}}\n"
        content = render(self.template, {"name": "Alice"})

        self.assertEqual(content.body, "  Alice\n")
