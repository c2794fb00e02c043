"""
Serializers for the users app.

Defines serializers for the current user, registration with a display
name, email-based login that returns JWT refresh/access tokens, and the
super-admin user list with per-user content counts.
"""
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from moderation.choices import Role

from .validators import validate_email_unique

User = get_user_model()


def _as_drf_error(exc: DjangoValidationError) -> serializers.ValidationError:
    return serializers.ValidationError(list(exc.messages))


class UserMiniSerializer(serializers.ModelSerializer):
    """Owner summary embedded in catalog payloads."""
    name = serializers.CharField(source="profile.name", read_only=True, default="")

    class Meta:
        model = User
        fields = ("id", "name", "email")


class UserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="profile.name", read_only=True, default="")
    role = serializers.CharField(source="profile.role", read_only=True, default=Role.GENERAL)

    class Meta:
        model = User
        fields = ["id", "username", "email", "name", "role", "date_joined"]
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})

    class Meta:
        model = User
        fields = ["name", "email", "password"]

    def validate_email(self, value: str) -> str:
        try:
            return validate_email_unique(value)
        except DjangoValidationError as exc:
            raise _as_drf_error(exc)

    def validate(self, attrs):
        # Run Django's password validators with user context so similarity checks work
        pseudo_user = User(username=attrs["email"], email=attrs["email"])
        try:
            validate_password(attrs["password"], user=pseudo_user)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({"password": list(exc.messages)})
        return attrs

    def create(self, validated_data):
        name = (validated_data.pop("name", "") or "").strip()
        email = validated_data["email"]
        user = User(username=email, email=email, first_name=name[:150])
        user.set_password(validated_data["password"])
        user.save()
        # profile is created by the post_save signal
        user.profile.name = name
        user.profile.save(update_fields=["name", "updated_at"])
        return user

    def to_representation(self, instance):
        return UserSerializer(instance).data


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Login using email + password and return SimpleJWT refresh/access tokens.
    POST body: {"email": "...", "password": "..."}
    """
    email = serializers.EmailField(write_only=True)
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Remove the parent-added username field so the browsable form shows only Email + Password.
        self.fields.pop(self.username_field, None)

    def validate(self, attrs):
        email = attrs.get("email")
        password = attrs.get("password")

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise AuthenticationFailed("No active account found with the given credentials")

        if not user.is_active:
            raise AuthenticationFailed("User account is disabled")

        if not user.check_password(password):
            raise AuthenticationFailed("No active account found with the given credentials")

        refresh = self.get_token(user)
        return {"refresh": str(refresh), "access": str(refresh.access_token)}


class AdminUserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source="profile.name", read_only=True, default="")
    role = serializers.ChoiceField(source="profile.role", choices=Role.choices)
    resource_count = serializers.IntegerField(read_only=True)
    category_count = serializers.IntegerField(read_only=True)
    tag_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id", "email", "name", "role", "date_joined", "last_login",
            "resource_count", "category_count", "tag_count",
        ]
        read_only_fields = ["id", "email", "name", "date_joined", "last_login"]

    def update(self, instance, validated_data):
        profile_data = validated_data.pop("profile", {})
        role = profile_data.get("role")
        if role:
            instance.profile.role = role
            instance.profile.save(update_fields=["role", "updated_at"])
        return instance
