"""
Common test fixtures for Django REST Framework API tests.

Provides general users (alice, bob), a super admin, clients authenticated
with a JWT token obtained from ``/api/auth/token/`` and a few catalog
rows shared by the catalog and moderation tests.
"""
import pytest
from django.contrib.auth.models import User
from django.test import Client

from catalog.models import Category, Resource, Tag
from moderation.choices import ApprovalStatus, Role

PASSWORD = "pass12345"


def make_user(email, role=Role.GENERAL, name=""):
    user = User.objects.create_user(username=email, email=email, password=PASSWORD)
    profile = user.profile
    profile.role = role
    profile.name = name
    profile.save()
    return user


def jwt_client(user):
    """Authenticate a fresh Django test client using JWT tokens."""
    client = Client()
    resp = client.post(
        "/api/auth/token/",
        {"email": user.email, "password": PASSWORD},
        content_type="application/json",
    )
    assert resp.status_code == 200
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {resp.json()['access']}"
    return client


@pytest.fixture
def alice(db):
    return make_user("alice@example.com", name="Alice")


@pytest.fixture
def bob(db):
    return make_user("bob@example.com", name="Bob")


@pytest.fixture
def super_admin(db):
    return make_user("root@example.com", role=Role.SUPER_ADMIN, name="Root")


@pytest.fixture
def alice_client(alice):
    return jwt_client(alice)


@pytest.fixture
def bob_client(bob):
    return jwt_client(bob)


@pytest.fixture
def super_client(super_admin):
    return jwt_client(super_admin)


@pytest.fixture
def anon_client(db):
    return Client()


@pytest.fixture
def category(super_admin):
    """An approved public category owned by the super admin."""
    return Category.objects.create(
        name="Frameworks",
        slug="frameworks",
        owner=super_admin,
        approval_status=ApprovalStatus.APPROVED,
    )


@pytest.fixture
def tag(super_admin):
    return Tag.objects.create(
        name="React",
        slug="react",
        color="#61dafb",
        owner=super_admin,
        approval_status=ApprovalStatus.APPROVED,
    )


@pytest.fixture
def make_resource(category):
    """Factory for resources in the shared category."""
    def _make(owner, title, is_public=True, status=ApprovalStatus.APPROVED, **extra):
        extra.setdefault("url", f"https://example.com/{title.lower().replace(' ', '-')}")
        extra.setdefault("description", f"About {title}")
        return Resource.objects.create(
            owner=owner,
            title=title,
            category=extra.pop("category", category),
            is_public=is_public,
            approval_status=status,
            **extra,
        )
    return _make
