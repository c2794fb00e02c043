"""
Tests for registration, login (JWT and session) and the super-admin user
management endpoints in the users app.
"""
import pytest
from django.contrib.auth.models import User
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import Client

from catalog.models import Resource
from moderation.choices import Role
from moderation.engine import Actor

STRONG_PASSWORD = "Blue-Harbor-2931"
PASSWORD = "pass12345"


def bearer_client(user):
    client = Client()
    resp = client.post(
        "/api/auth/token/", {"email": user.email, "password": PASSWORD},
        content_type="application/json",
    )
    client.defaults["HTTP_AUTHORIZATION"] = f"Bearer {resp.json()['access']}"
    return client


@pytest.mark.django_db
def test_register_creates_general_user_and_logs_in(client):
    """Ensure a new user can register and is signed in right away."""
    payload = {"name": "Carol C", "email": "Carol@Example.com", "password": STRONG_PASSWORD}
    response = client.post("/api/auth/register/", payload, content_type="application/json")
    assert response.status_code == 201
    body = response.json()
    assert body["email"] == "carol@example.com"
    assert body["username"] == "carol@example.com"
    assert body["name"] == "Carol C"
    assert body["role"] == Role.GENERAL

    me = client.get("/api/auth/session/me/")
    assert me.status_code == 200
    assert me.json()["email"] == "carol@example.com"


@pytest.mark.django_db
def test_register_rejects_duplicate_email_and_weak_password(client, alice):
    resp = client.post(
        "/api/auth/register/",
        {"name": "Again", "email": "ALICE@example.com", "password": STRONG_PASSWORD},
        content_type="application/json",
    )
    assert resp.status_code == 400
    assert "email" in resp.json()

    resp = client.post(
        "/api/auth/register/",
        {"name": "Weak", "email": "weak@example.com", "password": "123"},
        content_type="application/json",
    )
    assert resp.status_code == 400
    assert "password" in resp.json()


@pytest.mark.django_db
def test_token_login_by_email(client, alice):
    resp = client.post(
        "/api/auth/token/", {"email": "alice@example.com", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert {"access", "refresh"} <= set(resp.json())

    resp = client.post(
        "/api/auth/token/", {"email": "alice@example.com", "password": "wrong"},
        content_type="application/json",
    )
    assert resp.status_code == 401


@pytest.mark.django_db
def test_session_login_me_logout(alice):
    client = Client()
    assert client.get("/api/auth/session/me/").status_code in (401, 403)

    resp = client.post(
        "/api/auth/session/login/", {"email": "ALICE@example.com", "password": "pass12345"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Alice"

    assert client.get("/api/auth/session/me/").json()["role"] == Role.GENERAL
    assert client.post("/api/auth/session/logout/").status_code == 200
    assert client.get("/api/auth/session/me/").status_code in (401, 403)


@pytest.mark.django_db
def test_superuser_profile_is_super_admin():
    user = User.objects.create_superuser("boss", "boss@example.com", "pass12345")
    assert user.profile.role == Role.SUPER_ADMIN


@pytest.mark.django_db
def test_admin_user_list_requires_super_admin(alice_client, anon_client):
    assert alice_client.get("/api/admin/users/").status_code == 403
    assert anon_client.get("/api/admin/users/").status_code == 401


@pytest.mark.django_db
def test_admin_user_list_counts_and_filters(super_client, alice, bob, make_resource):
    make_resource(alice, "Alice One")
    make_resource(alice, "Alice Two")

    resp = super_client.get("/api/admin/users/?role=GENERAL&sort_field=email&sort_order=asc")
    assert resp.status_code == 200
    rows = resp.json()
    assert [r["email"] for r in rows] == ["alice@example.com", "bob@example.com"]
    assert rows[0]["resource_count"] == 2
    assert rows[1]["resource_count"] == 0

    resp = super_client.get("/api/admin/users/?role=SUPER_ADMIN")
    row = resp.json()[0]
    assert row["email"] == "root@example.com"
    # owns the shared "Frameworks" category
    assert row["category_count"] == 1


@pytest.mark.django_db
def test_admin_changes_role(super_client, alice):
    resp = super_client.patch(
        f"/api/admin/users/{alice.id}/", {"role": Role.SUPER_ADMIN}, content_type="application/json"
    )
    assert resp.status_code == 200
    assert resp.json()["role"] == Role.SUPER_ADMIN
    alice.profile.refresh_from_db()
    assert alice.profile.role == Role.SUPER_ADMIN

    resp = super_client.patch(
        f"/api/admin/users/{alice.id}/", {"role": "OWNER"}, content_type="application/json"
    )
    assert resp.status_code == 400


@pytest.mark.django_db
def test_admin_cannot_demote_or_delete_self(super_client, super_admin):
    resp = super_client.patch(
        f"/api/admin/users/{super_admin.id}/", {"role": Role.GENERAL}, content_type="application/json"
    )
    assert resp.status_code == 400
    assert super_client.delete(f"/api/admin/users/{super_admin.id}/").status_code == 400
    super_admin.profile.refresh_from_db()
    assert super_admin.profile.role == Role.SUPER_ADMIN


@pytest.mark.django_db
def test_admin_deletes_user_with_content(super_client, alice, make_resource):
    make_resource(alice, "Goes Away")

    assert super_client.delete(f"/api/admin/users/{alice.id}/").status_code == 204
    assert not User.objects.filter(pk=alice.pk).exists()
    assert not Resource.objects.filter(title="Goes Away").exists()


@pytest.mark.django_db
def test_create_super_admin_command(alice):
    call_command("create_super_admin", email="new-admin@example.com", password="pass12345")
    user = User.objects.get(email="new-admin@example.com")
    assert user.profile.role == Role.SUPER_ADMIN
    assert user.check_password("pass12345")

    # promoting an existing account, and running twice, is fine
    call_command("create_super_admin", email="alice@example.com")
    call_command("create_super_admin", email="alice@example.com")
    alice.profile.refresh_from_db()
    assert alice.profile.role == Role.SUPER_ADMIN

    with pytest.raises(CommandError):
        call_command("create_super_admin", email="nobody@example.com")


@pytest.mark.django_db
def test_demoted_superuser_loses_super_admin_access(super_client):
    ops = User.objects.create_superuser("ops@example.com", "ops@example.com", PASSWORD)
    assert bearer_client(ops).get("/api/admin/approval/").status_code == 200

    resp = super_client.patch(
        f"/api/admin/users/{ops.id}/", {"role": Role.GENERAL}, content_type="application/json"
    )
    assert resp.status_code == 200

    ops.refresh_from_db()
    ops.save()
    ops.profile.refresh_from_db()
    assert ops.profile.role == Role.GENERAL
    assert not Actor.from_user(ops).is_super_admin
    assert bearer_client(ops).get("/api/admin/approval/").status_code == 403
