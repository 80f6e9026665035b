"""Unit tests for core.repositories.user_repository module."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock, patch

from django.test import TestCase
from django.utils import timezone

from core.models import User
from core.repositories import UserRepository
from tests.factories import create_user


class TestUserRepositoryQueries(unittest.TestCase):
    """Tests for UserRepository query construction."""

    @patch("core.repositories.user_repository.User")
    def test_get_user_filters_by_id(self, mock_user_model):
        """Test that get_user filters by user_id and takes the first row."""
        mock_queryset = MagicMock()
        mock_user_model.objects.filter.return_value = mock_queryset

        result = UserRepository.get_user("u1")

        mock_user_model.objects.filter.assert_called_once_with(user_id="u1")
        self.assertEqual(result, mock_queryset.first.return_value)


class TestUserRepositoryMatch(TestCase):
    """Tests for audience matching against the directory."""

    def setUp(self):
        """Create a small directory."""
        now = timezone.now()
        month_ago = now - timedelta(days=30)
        create_user(user_id="a", role="mentor", tags=["python"], location="Berlin")
        create_user(user_id="b", role="mentor", tags=["go"], location="Lisbon")
        create_user(
            user_id="c", role="mentee", tags=["python", "go"], location="Berlin"
        )
        User.objects.update(last_active_at=now)
        User.objects.filter(user_id="b").update(last_active_at=month_ago)
        create_user(user_id="d", role="mentor", tags=["python"], is_active=False)
        self.now = now

    def test_get_user(self):
        """Test single lookups."""
        self.assertEqual(UserRepository.get_user("a").role, "mentor")
        self.assertIsNone(UserRepository.get_user("missing"))

    def test_match_by_role(self):
        """Test inactive users are excluded."""
        self.assertEqual(UserRepository.match(roles=["mentor"]), ["a", "b"])

    def test_match_by_tag_overlap(self):
        """Test any shared tag matches."""
        self.assertEqual(UserRepository.match(tags=["go"]), ["b", "c"])

    def test_criteria_are_combined(self):
        """Test every criterion must hold."""
        self.assertEqual(
            UserRepository.match(roles=["mentor"], locations=["Berlin"]), ["a"]
        )

    def test_last_active_after(self):
        """Test recent activity filter."""
        self.assertEqual(
            UserRepository.match(last_active_after=self.now - timedelta(days=1)),
            ["a", "c"],
        )

    def test_tag_match_skips_non_string_entries(self):
        """Test that nested values in a tag list neither match nor break."""
        create_user(user_id="e", tags=[{"name": "go"}, ["go"], "rust"])
        create_user(user_id="f", tags=[{"name": "go"}, "go"])

        self.assertEqual(
            UserRepository.match(tags=["go", "rust"]), ["b", "c", "e", "f"]
        )
