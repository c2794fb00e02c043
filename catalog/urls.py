"""
URL patterns for the catalog app.

A DRF router provides ``/categories/``, ``/tags/`` and ``/resources/``
(plus ``/resources/<id>/click/``); bookmarks, quick search and the URL
scraper are plain API views.  Included under the ``/api/`` prefix.
"""
from django.urls import path
from rest_framework.routers import DefaultRouter

from .views import (
    BookmarkView,
    CategoryViewSet,
    ResourceViewSet,
    ScrapeUrlView,
    SearchView,
    TagViewSet,
)

router = DefaultRouter()
router.register(r"categories", CategoryViewSet, basename="category")
router.register(r"tags", TagViewSet, basename="tag")
router.register(r"resources", ResourceViewSet, basename="resource")

urlpatterns = router.urls + [
    path("bookmarks/", BookmarkView.as_view(), name="bookmarks"),
    path("search/", SearchView.as_view(), name="search"),
    path("scrape-url/", ScrapeUrlView.as_view(), name="scrape-url"),
]
