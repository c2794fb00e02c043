"""
Serializers for the catalog app.

Creation goes through ``moderation.services.create_moderated`` so every
kind shares the same duplicate check and approval rules.  Updates re-run
the approval decision only when the owner actually flips ``is_public``.
``is_hot`` / ``is_trending`` are writable by super admins only; for anyone
else they are dropped from the payload.
"""
from django.db import transaction
from django.utils.text import slugify
from rest_framework import serializers

from moderation.engine import Actor, decide_approval_status_on_visibility_change
from moderation.exceptions import Conflict, NotFound
from moderation.services import create_moderated, natural_key_q
from users.serializers import UserMiniSerializer

from .models import Category, Resource, ResourceTag, Tag, tag_slug


class ModeratedSerializerMixin:
    """Shared create/update flow for the three moderated kinds."""
    natural_key_fields = ()

    def get_actor(self):
        request = self.context.get("request")
        return Actor.from_user(getattr(request, "user", None))

    def natural_key(self, data):
        return {field: data.get(field) for field in self.natural_key_fields}

    def check_update_conflict(self, instance, data):
        changed = {
            field: value
            for field, value in self.natural_key(data).items()
            if value and value.lower() != (getattr(instance, field) or "").lower()
        }
        if not changed:
            return
        clash = type(instance).objects.filter(natural_key_q(**changed)).exclude(pk=instance.pk)
        if clash.exists():
            raise Conflict()

    def apply_visibility_change(self, instance, validated_data):
        new_is_public = validated_data.get("is_public")
        if new_is_public is None or new_is_public == instance.is_public:
            return
        instance.approval_status = decide_approval_status_on_visibility_change(
            self.get_actor(), new_is_public, instance.approval_status
        )

    def create_with_moderation(self, validated_data):
        model = self.Meta.model
        return create_moderated(
            model, self.get_actor(), self.natural_key(validated_data), **validated_data
        )

    def update_moderated(self, instance, validated_data):
        self.check_update_conflict(instance, validated_data)
        self.apply_visibility_change(instance, validated_data)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance


class CategorySerializer(ModeratedSerializerMixin, serializers.ModelSerializer):
    natural_key_fields = ("name", "slug")

    slug = serializers.SlugField(max_length=140, required=False, allow_blank=True)
    owner = UserMiniSerializer(read_only=True)

    class Meta:
        model = Category
        fields = [
            "id", "name", "slug", "description",
            "is_public", "approval_status", "owner",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "approval_status", "owner", "created_at", "updated_at"]

    def validate(self, attrs):
        name = attrs.get("name")
        if name is not None:
            attrs["name"] = name.strip()
        if "slug" in attrs or self.instance is None:
            attrs["slug"] = attrs.get("slug") or slugify(attrs.get("name") or self.instance.name)
            if not attrs["slug"]:
                raise serializers.ValidationError({"slug": "Could not derive a slug from the name."})
        return attrs

    def create(self, validated_data):
        return self.create_with_moderation(validated_data)

    def update(self, instance, validated_data):
        return self.update_moderated(instance, validated_data)


class TagMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tag
        fields = ["id", "name", "slug", "color"]


class TagSerializer(ModeratedSerializerMixin, serializers.ModelSerializer):
    natural_key_fields = ("name", "slug")

    owner = UserMiniSerializer(read_only=True)

    class Meta:
        model = Tag
        fields = [
            "id", "name", "slug", "color",
            "is_public", "approval_status", "owner",
            "created_at", "updated_at",
        ]
        read_only_fields = ["id", "slug", "approval_status", "owner", "created_at", "updated_at"]

    def validate(self, attrs):
        name = attrs.get("name")
        if name is not None:
            attrs["name"] = name.strip()
            attrs["slug"] = tag_slug(attrs["name"])
            if not attrs["slug"]:
                raise serializers.ValidationError({"name": "Tag name must contain letters or digits."})
        return attrs

    def create(self, validated_data):
        return self.create_with_moderation(validated_data)

    def update(self, instance, validated_data):
        return self.update_moderated(instance, validated_data)


class CategoryMiniSerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ["id", "name", "slug"]


class ResourceSerializer(ModeratedSerializerMixin, serializers.ModelSerializer):
    natural_key_fields = ("title", "url")

    category = CategoryMiniSerializer(read_only=True)
    category_id = serializers.IntegerField(write_only=True)
    tags = TagMiniSerializer(many=True, read_only=True)
    tag_ids = serializers.ListField(
        child=serializers.IntegerField(), write_only=True, required=False
    )
    owner = UserMiniSerializer(read_only=True)

    class Meta:
        model = Resource
        fields = [
            "id", "title", "url", "description", "thumbnail",
            "category", "category_id", "tags", "tag_ids",
            "is_public", "approval_status", "is_hot", "is_trending",
            "click_count", "owner", "created_at", "updated_at",
        ]
        read_only_fields = [
            "id", "approval_status", "click_count", "owner", "created_at", "updated_at",
        ]

    def validate_category_id(self, value):
        if not Category.objects.filter(pk=value).exists():
            raise NotFound("Category not found.")
        return value

    def validate_tag_ids(self, value):
        ids = list(dict.fromkeys(value))
        found = set(Tag.objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = [pk for pk in ids if pk not in found]
        if missing:
            raise serializers.ValidationError(f"Unknown tag ids: {missing}")
        return ids

    def validate(self, attrs):
        actor = self.get_actor()
        if not (actor and actor.is_super_admin):
            attrs.pop("is_hot", None)
            attrs.pop("is_trending", None)
        for field in ("title", "url"):
            if attrs.get(field):
                attrs[field] = attrs[field].strip()
        return attrs

    def _set_tags(self, resource, tag_ids):
        ResourceTag.objects.filter(resource=resource).delete()
        ResourceTag.objects.bulk_create(
            [ResourceTag(resource=resource, tag_id=pk) for pk in tag_ids]
        )

    def create(self, validated_data):
        tag_ids = validated_data.pop("tag_ids", [])
        with transaction.atomic():
            resource = self.create_with_moderation(validated_data)
            if tag_ids:
                self._set_tags(resource, tag_ids)
        return resource

    def update(self, instance, validated_data):
        tag_ids = validated_data.pop("tag_ids", None)
        with transaction.atomic():
            resource = self.update_moderated(instance, validated_data)
            # a present tag_ids list replaces the whole tag set
            if tag_ids is not None:
                self._set_tags(resource, tag_ids)
        return resource


class BookmarkToggleSerializer(serializers.Serializer):
    resource_id = serializers.IntegerField()


class ScrapeUrlSerializer(serializers.Serializer):
    url = serializers.CharField(max_length=2000)
