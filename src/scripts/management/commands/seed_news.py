"""Seed demo accounts for every role and a handful of sample articles."""

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from access_control.roles import Role
from authentication.managers import UserManager
from news.models import Article
from news.slugs import unique_slug
from news.state_machine import ArticleStatus

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("admin@newsdesk.local", "Admin User", Role.ADMIN),
    ("editor@newsdesk.local", "Editor User", Role.EDITOR),
    ("user@newsdesk.local", "Normal User", Role.USER),
]

DEMO_ARTICLES = [
    {
        "title": "Local Community Garden Wins National Award",
        "content": "Volunteers turned a vacant lot into a thriving urban garden.",
        "category": "Lifestyle",
        "status": ArticleStatus.APPROVED,
        "author": Role.ADMIN,
    },
    {
        "title": "New Technology Transforms Waste Management",
        "content": "AI-assisted sorting is lifting recycling rates across the city.",
        "category": "Technology",
        "status": ArticleStatus.APPROVED,
        "author": Role.ADMIN,
    },
    {
        "title": "Solar Boom",
        "content": "Rooftop installations doubled over the last year.",
        "category": "Environment",
        "status": ArticleStatus.PENDING,
        "author": Role.EDITOR,
    },
]


def create_seed_users(password: str = DEMO_PASSWORD) -> dict:
    """Create one demo account per role if missing and return a role->User map."""
    User = get_user_model()
    users = {}
    for email, name, role in DEMO_USERS:
        user, _ = User.objects.get_or_create(
            email=email,
            defaults={
                "name": name,
                "role": role,
                "password_hash": UserManager.hash_password(password),
            },
        )
        users[role] = user
    return users


def create_seed_articles(users: dict) -> list:
    """Create sample articles (idempotent by title and author)."""
    articles = []
    for entry in DEMO_ARTICLES:
        author = users[entry["author"]]
        article = Article.objects.filter(title=entry["title"], author=author).first()
        if article is None:
            article = Article.objects.create(
                title=entry["title"],
                slug=unique_slug(entry["title"]),
                content=entry["content"],
                category=entry["category"],
                status=entry["status"],
                author=author,
            )
        articles.append(article)
    return articles


class Command(BaseCommand):
    """Management command to seed demo users and articles."""

    help = (
        "Seed ADMIN/EDITOR/USER demo accounts and sample articles. "
        "Use --reset to remove previously seeded demo accounts first."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete the demo accounts (and, by cascade, their content) before seeding.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        if options.get("reset"):
            self._reset_seeded_data()

        self.stdout.write("Seeding demo data...")
        users = create_seed_users()
        articles = create_seed_articles(users)
        self.stdout.write(
            self.style.SUCCESS(f"Seed completed: {len(users)} users, {len(articles)} articles.")
        )

    def _reset_seeded_data(self) -> None:
        self.stdout.write("Resetting previously seeded demo data...")
        User = get_user_model()
        # Articles, comments, and likes cascade from their owners.
        User.objects.filter(email__in=[email for email, _, _ in DEMO_USERS]).delete()
        self.stdout.write(self.style.WARNING("Seeded demo data cleared."))
