"""Unit tests for the core app configuration."""

import unittest
from unittest.mock import patch

from django.apps import apps
from django.test import SimpleTestCase, override_settings

from core.apps import CoreConfig


class TestCoreConfig(SimpleTestCase):
    """Tests for CoreConfig."""

    def test_registered_config(self):
        """Test the installed app uses CoreConfig."""
        config = apps.get_app_config("core")

        self.assertIsInstance(config, CoreConfig)
        self.assertEqual(config.verbose_name, "Notification engine")

    @patch("core.logging.setup_logging")
    def test_ready_skips_logging_setup_in_tests(self, mock_setup):
        """Test structlog is left alone while TEST_MODE is set."""
        apps.get_app_config("core").ready()

        mock_setup.assert_not_called()

    @override_settings(TEST_MODE=False)
    @patch("core.logging.setup_logging")
    def test_ready_configures_logging(self, mock_setup):
        """Test structlog is configured at startup."""
        apps.get_app_config("core").ready()

        mock_setup.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
