"""Seed command and policy wiring checks."""

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase

from access_control.checks import policy_views_declare_element
from access_control.roles import Role
from authentication.managers import UserManager
from news.models import Article
from news.state_machine import ArticleStatus
from scripts.management.commands.seed_news import DEMO_ARTICLES, DEMO_PASSWORD, DEMO_USERS

User = get_user_model()


class SeedNewsCommandTests(TestCase):
    def test_seeds_one_account_per_role_and_sample_articles(self):
        call_command("seed_news", stdout=StringIO())

        self.assertEqual(User.objects.count(), len(DEMO_USERS))
        self.assertEqual(set(User.objects.values_list("role", flat=True)), set(Role.values))
        self.assertEqual(Article.objects.count(), len(DEMO_ARTICLES))

        editor = User.objects.get(role=Role.EDITOR)
        self.assertTrue(UserManager.verify_password(editor, DEMO_PASSWORD))
        self.assertEqual(
            Article.objects.get(title="Solar Boom").status, ArticleStatus.PENDING
        )

    def test_is_idempotent(self):
        call_command("seed_news", stdout=StringIO())
        call_command("seed_news", stdout=StringIO())

        self.assertEqual(User.objects.count(), len(DEMO_USERS))
        self.assertEqual(Article.objects.count(), len(DEMO_ARTICLES))

    def test_reset_recreates_demo_data(self):
        call_command("seed_news", stdout=StringIO())
        first_ids = set(User.objects.values_list("id", flat=True))

        out = StringIO()
        call_command("seed_news", "--reset", stdout=out)

        self.assertIn("cleared", out.getvalue())
        self.assertTrue(first_ids.isdisjoint(User.objects.values_list("id", flat=True)))
        self.assertEqual(Article.objects.count(), len(DEMO_ARTICLES))


class PolicyWiringCheckTests(SimpleTestCase):
    def test_project_views_pass(self):
        self.assertEqual(policy_views_declare_element(None), [])
