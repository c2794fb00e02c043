"""
Tests for categories and tags: listing order, slug lookup,
slug generation and duplicate handling.
"""
import pytest

from catalog.models import Category, Tag, tag_slug
from moderation import services
from moderation.choices import ApprovalStatus
from moderation.engine import Actor
from moderation.exceptions import Conflict


@pytest.mark.parametrize(
    "name,expected",
    [
        ("React", "react"),
        ("Node.js", "node-js"),
        ("  C++ / C#  ", "c-c"),
        ("Web  Components!", "web-components"),
    ],
)
def test_tag_slug(name, expected):
    assert tag_slug(name) == expected


@pytest.mark.django_db
def test_category_list_puts_approved_first(alice, alice_client, super_admin):
    Category.objects.create(name="Animation", slug="animation", owner=alice, approval_status=ApprovalStatus.PENDING)
    Category.objects.create(name="Build Tools", slug="build-tools", owner=super_admin,
                            approval_status=ApprovalStatus.APPROVED)
    Category.objects.create(name="CSS", slug="css", owner=super_admin, approval_status=ApprovalStatus.APPROVED)

    resp = alice_client.get("/api/categories/")
    assert resp.status_code == 200
    assert [c["name"] for c in resp.json()] == ["Build Tools", "CSS", "Animation"]

    resp = alice_client.get("/api/categories/?sort_field=name&sort_order=desc")
    assert [c["name"] for c in resp.json()] == ["CSS", "Build Tools", "Animation"]


@pytest.mark.django_db
def test_category_slug_lookup(anon_client, category, alice):
    Category.objects.create(name="Secret", slug="secret", owner=alice, is_public=False)

    resp = anon_client.get("/api/categories/?slug=FRAMEWORKS")
    assert resp.status_code == 200
    assert resp.json()["id"] == category.id

    assert anon_client.get("/api/categories/?slug=secret").status_code == 404
    assert anon_client.get("/api/categories/?slug=missing").status_code == 404


@pytest.mark.django_db
def test_category_create_derives_slug_and_status(alice_client, super_client):
    resp = alice_client.post(
        "/api/categories/", {"name": "State Management", "description": "Stores"},
        content_type="application/json",
    )
    assert resp.status_code == 201
    assert resp.json()["slug"] == "state-management"
    assert resp.json()["approval_status"] == ApprovalStatus.PENDING

    resp = super_client.post(
        "/api/categories/", {"name": "Accessibility"}, content_type="application/json"
    )
    assert resp.status_code == 201
    assert resp.json()["approval_status"] == ApprovalStatus.APPROVED


@pytest.mark.django_db
def test_category_duplicate_slug_conflicts(bob_client, category):
    resp = bob_client.post(
        "/api/categories/", {"name": "Libraries", "slug": "Frameworks"},
        content_type="application/json",
    )
    assert resp.status_code == 409
    assert resp.json()["detail"] == "duplicate name or slug"


@pytest.mark.django_db
def test_tag_create_generates_slug(alice_client):
    resp = alice_client.post(
        "/api/tags/", {"name": "Next.js", "color": "#000000"}, content_type="application/json"
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["slug"] == "next-js"
    assert body["color"] == "#000000"
    assert body["approval_status"] == ApprovalStatus.PENDING


@pytest.mark.django_db
def test_tag_duplicate_name_is_case_insensitive(alice_client, tag):
    resp = alice_client.post("/api/tags/", {"name": "react"}, content_type="application/json")
    assert resp.status_code == 409
    assert Tag.objects.count() == 1


@pytest.mark.django_db
def test_tag_private_list(alice, alice_client, bob_client):
    Tag.objects.create(name="Mine", slug="mine", owner=alice, is_public=False,
                       approval_status=ApprovalStatus.APPROVED)

    assert [t["name"] for t in alice_client.get("/api/tags/?show_private=1").json()] == ["Mine"]
    assert bob_client.get("/api/tags/?show_private=1").json() == []
    assert bob_client.get("/api/tags/").json() == []


@pytest.mark.django_db
def test_owner_edits_and_deletes_tag(alice, alice_client, bob_client):
    tag = Tag.objects.create(name="Svelte", slug="svelte", owner=alice, approval_status=ApprovalStatus.APPROVED)

    assert bob_client.delete(f"/api/tags/{tag.id}/").status_code == 403

    resp = alice_client.patch(f"/api/tags/{tag.id}/", {"name": "SvelteKit"}, content_type="application/json")
    assert resp.status_code == 200
    assert resp.json()["slug"] == "sveltekit"

    assert alice_client.delete(f"/api/tags/{tag.id}/").status_code == 204
    assert not Tag.objects.filter(pk=tag.pk).exists()


@pytest.mark.django_db
def test_super_admin_supersedes_rejected_tag(alice, super_client):
    old = Tag.objects.create(name="jQuery", slug="jquery", owner=alice, approval_status=ApprovalStatus.REJECTED)

    resp = super_client.post("/api/tags/", {"name": "JQuery"}, content_type="application/json")
    assert resp.status_code == 201
    assert resp.json()["approval_status"] == ApprovalStatus.APPROVED
    assert not Tag.objects.filter(pk=old.pk).exists()
    assert list(Tag.objects.values_list("slug", flat=True)) == ["jquery"]


@pytest.mark.django_db
def test_live_duplicate_blocks_supersede(alice, super_admin, super_client):
    rejected = Category.objects.create(name="Tools", slug="tools-old", owner=alice,
                                       approval_status=ApprovalStatus.REJECTED)
    live = Category.objects.create(name="Utilities", slug="tools", owner=super_admin,
                                   approval_status=ApprovalStatus.APPROVED)

    resp = super_client.post("/api/categories/", {"name": "Tools", "slug": "tools"}, content_type="application/json")
    assert resp.status_code == 409
    assert Category.objects.filter(pk__in=[rejected.pk, live.pk]).count() == 2


@pytest.mark.django_db
def test_super_admin_supersedes_every_rejected_match(alice, bob, super_client):
    by_name = Category.objects.create(name="Tools", slug="tools-old", owner=alice,
                                      approval_status=ApprovalStatus.REJECTED)
    by_slug = Category.objects.create(name="Utilities", slug="tools", owner=bob,
                                      approval_status=ApprovalStatus.REJECTED)

    resp = super_client.post("/api/categories/", {"name": "Tools", "slug": "tools"}, content_type="application/json")
    assert resp.status_code == 201
    assert not Category.objects.filter(pk__in=[by_name.pk, by_slug.pk]).exists()
    assert list(Category.objects.values_list("name", flat=True)) == ["Tools"]


@pytest.mark.django_db
def test_concurrent_duplicate_becomes_conflict(alice, monkeypatch, tag):
    # another request created the row after the duplicate check ran
    monkeypatch.setattr(services, "find_natural_key_matches", lambda model, **values: [])

    with pytest.raises(Conflict):
        services.create_moderated(
            Tag, Actor.from_user(alice), {"name": "react", "slug": "react"},
            name="react", slug="react",
        )
    assert Tag.objects.count() == 1
