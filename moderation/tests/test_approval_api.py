"""
Tests for the super-admin approval queue and the status transition
handler, including the end-to-end submit/review flows.
"""
import pytest

from catalog.models import Category, Resource, Tag
from moderation.choices import ApprovalStatus, ContentKind
from moderation.engine import Actor
from moderation.exceptions import InvalidArgument, NotFound, Unauthorized
from moderation.services import transition


@pytest.mark.django_db
def test_general_user_cannot_use_approval_endpoints(alice_client, anon_client):
    assert alice_client.get("/api/admin/approval/").status_code == 403
    resp = alice_client.post(
        "/api/admin/approval/",
        {"type": "resource", "id": 1, "status": "APPROVED"},
        content_type="application/json",
    )
    assert resp.status_code == 403
    assert anon_client.get("/api/admin/approval/").status_code == 401


@pytest.mark.django_db
def test_queue_lists_only_public_pending_items(super_client, alice, make_resource):
    pending = make_resource(alice, "Pending Public", status=ApprovalStatus.PENDING)
    make_resource(alice, "Private Pending", is_public=False, status=ApprovalStatus.PENDING)
    make_resource(alice, "Already Approved")
    Tag.objects.create(name="Vue", slug="vue", owner=alice, approval_status=ApprovalStatus.PENDING)

    resp = super_client.get("/api/admin/approval/")
    assert resp.status_code == 200
    body = resp.json()
    assert [r["id"] for r in body["resources"]] == [pending.id]
    assert [t["name"] for t in body["tags"]] == ["Vue"]
    assert body["categories"] == []


@pytest.mark.django_db
def test_queue_type_and_status_filters(super_client, alice, make_resource):
    rejected = make_resource(alice, "Bad Link", status=ApprovalStatus.REJECTED)

    resp = super_client.get("/api/admin/approval/?type=resources&status=rejected")
    assert resp.status_code == 200
    body = resp.json()
    assert list(body) == ["resources"]
    assert [r["id"] for r in body["resources"]] == [rejected.id]

    assert super_client.get("/api/admin/approval/?status=MAYBE").status_code == 400


@pytest.mark.django_db
def test_post_transition_returns_message_and_item(super_client, alice, make_resource):
    resource = make_resource(alice, "Pending Public", status=ApprovalStatus.PENDING)

    resp = super_client.post(
        "/api/admin/approval/",
        {"type": "resource", "id": resource.id, "status": "approved"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "resource approved successfully"
    assert body["data"]["approval_status"] == ApprovalStatus.APPROVED


@pytest.mark.django_db
def test_post_transition_rejects_bad_input(super_client, category):
    resp = super_client.post(
        "/api/admin/approval/",
        {"type": "widget", "id": category.id, "status": "APPROVED"},
        content_type="application/json",
    )
    assert resp.status_code == 400

    resp = super_client.post(
        "/api/admin/approval/",
        {"type": "category", "id": category.id, "status": "MAYBE"},
        content_type="application/json",
    )
    assert resp.status_code == 400

    resp = super_client.post(
        "/api/admin/approval/",
        {"type": "category", "id": 987654, "status": "APPROVED"},
        content_type="application/json",
    )
    assert resp.status_code == 404


@pytest.mark.django_db
def test_transition_is_idempotent_and_round_trips(super_admin, alice):
    admin = Actor.from_user(super_admin)
    cat = Category.objects.create(name="Tooling", slug="tooling", owner=alice)

    for _ in range(2):
        cat = transition(admin, ContentKind.CATEGORY, cat.id, ApprovalStatus.REJECTED)
        assert cat.approval_status == ApprovalStatus.REJECTED

    cat = transition(admin, "category", cat.id, "APPROVED")
    cat = transition(admin, "category", cat.id, "PENDING")
    cat.refresh_from_db()
    assert cat.approval_status == ApprovalStatus.PENDING
    assert cat.is_public is True
    assert cat.owner_id == alice.id


@pytest.mark.django_db
def test_transition_guards(alice, category):
    with pytest.raises(Unauthorized):
        transition(Actor.from_user(alice), "category", category.id, "APPROVED")
    with pytest.raises(Unauthorized):
        transition(None, "category", category.id, "APPROVED")

    admin = Actor(user_id=0, role="SUPER_ADMIN")
    with pytest.raises(InvalidArgument):
        transition(admin, "category", category.id, "DONE")
    with pytest.raises(InvalidArgument):
        transition(admin, "post", category.id, "APPROVED")
    with pytest.raises(NotFound):
        transition(admin, "tag", 424242, "APPROVED")


@pytest.mark.django_db
def test_submit_review_and_publish_flow(alice_client, bob_client, super_client, anon_client, category):
    """A public submission is hidden until approved, then visible to all."""
    resp = alice_client.post(
        "/api/resources/",
        {
            "title": "Vite Guide",
            "url": "https://vitejs.dev/guide/",
            "description": "Getting started with Vite",
            "category_id": category.id,
        },
        content_type="application/json",
    )
    assert resp.status_code == 201
    resource_id = resp.json()["id"]
    assert resp.json()["approval_status"] == ApprovalStatus.PENDING

    assert resource_id not in [r["id"] for r in anon_client.get("/api/resources/").json()]
    assert resource_id not in [r["id"] for r in bob_client.get("/api/resources/").json()]
    assert resource_id in [r["id"] for r in alice_client.get("/api/resources/").json()]

    pending = super_client.get("/api/resources/?show_pending=true").json()
    assert [r["id"] for r in pending] == [resource_id]

    resp = super_client.post(
        "/api/admin/approval/",
        {"type": "resource", "id": resource_id, "status": "APPROVED"},
        content_type="application/json",
    )
    assert resp.status_code == 200
    assert resource_id in [r["id"] for r in anon_client.get("/api/resources/").json()]


@pytest.mark.django_db
def test_rejected_item_can_be_superseded_only_by_super_admin(alice_client, super_client, alice):
    rejected = Category.objects.create(
        name="CSS", slug="css", owner=alice, approval_status=ApprovalStatus.REJECTED
    )

    resp = alice_client.post(
        "/api/categories/", {"name": "css"}, content_type="application/json"
    )
    assert resp.status_code == 409

    resp = super_client.post(
        "/api/categories/", {"name": "CSS"}, content_type="application/json"
    )
    assert resp.status_code == 201
    assert resp.json()["approval_status"] == ApprovalStatus.APPROVED
    assert not Category.objects.filter(pk=rejected.pk).exists()
    assert Category.objects.filter(name__iexact="css").count() == 1


@pytest.mark.django_db
def test_rejected_private_item_going_public_reenters_review(alice_client, alice, make_resource):
    resource = make_resource(alice, "Old Notes", is_public=False, status=ApprovalStatus.REJECTED)

    resp = alice_client.patch(
        f"/api/resources/{resource.id}/", {"is_public": True}, content_type="application/json"
    )
    assert resp.status_code == 200
    resource.refresh_from_db()
    assert resource.is_public is True
    assert resource.approval_status == ApprovalStatus.PENDING


@pytest.mark.django_db
def test_edit_without_visibility_flip_keeps_status(alice_client, alice, make_resource):
    resource = make_resource(alice, "Stable Link", status=ApprovalStatus.APPROVED)

    resp = alice_client.patch(
        f"/api/resources/{resource.id}/",
        {"description": "Updated text", "is_public": True},
        content_type="application/json",
    )
    assert resp.status_code == 200
    resource.refresh_from_db()
    assert resource.description == "Updated text"
    assert resource.approval_status == ApprovalStatus.APPROVED


@pytest.mark.django_db
def test_private_create_is_approved_and_owner_only(alice_client, bob_client, category):
    resp = alice_client.post(
        "/api/resources/",
        {
            "title": "My Bookmarklet",
            "url": "https://example.com/bookmarklet",
            "description": "Personal",
            "category_id": category.id,
            "is_public": False,
        },
        content_type="application/json",
    )
    assert resp.status_code == 201
    assert resp.json()["approval_status"] == ApprovalStatus.APPROVED
    resource_id = resp.json()["id"]

    assert bob_client.get(f"/api/resources/{resource_id}/").status_code == 404
    private = alice_client.get("/api/resources/?show_private=true").json()
    assert [r["id"] for r in private] == [resource_id]
    assert Resource.objects.get(pk=resource_id).is_public is False
