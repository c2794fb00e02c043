"""
django-filter FilterSet for the super-admin user list.

Supports ``role`` (GENERAL / SUPER_ADMIN) and a ``q`` search across
username, email and display name.
"""
from django.contrib.auth.models import User
from django.db.models import Q
from django_filters import rest_framework as filters

from moderation.choices import Role


class AdminUserFilter(filters.FilterSet):
    role = filters.ChoiceFilter(field_name="profile__role", choices=Role.choices)
    q = filters.CharFilter(method="filter_q")

    class Meta:
        model = User
        fields = []

    def filter_q(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(username__icontains=value)
            | Q(email__icontains=value)
            | Q(profile__name__icontains=value)
        )
