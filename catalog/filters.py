from django.db.models import Q
from django_filters.rest_framework import BooleanFilter, CharFilter, FilterSet

from .models import Resource


class ResourceFilter(FilterSet):
    """Filter set for Resource queries."""
    category = CharFilter(method="filter_category")
    tag = CharFilter(method="filter_tag")
    search = CharFilter(method="filter_search")
    is_hot = BooleanFilter(field_name="is_hot")
    is_trending = BooleanFilter(field_name="is_trending")

    class Meta:
        model = Resource
        fields = ["category", "tag", "search", "is_hot", "is_trending"]

    def filter_category(self, queryset, name, value):
        # "all" means no category restriction
        if not value or value.lower() == "all":
            return queryset
        if value.isdigit():
            return queryset.filter(category_id=int(value))
        return queryset.filter(category__slug__iexact=value)

    def filter_tag(self, queryset, name, value):
        if value:
            return queryset.filter(tags__slug__iexact=value).distinct()
        return queryset

    def filter_search(self, queryset, name, value):
        value = (value or "").strip()
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))
