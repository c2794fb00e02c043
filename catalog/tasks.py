# catalog/tasks.py
import logging

from celery import shared_task

from .models import Resource
from .scraper import ScrapeError, fetch_metadata

logger = logging.getLogger(__name__)


@shared_task
def backfill_resource_metadata_task(resource_id: int) -> int:
    """Fill an empty thumbnail/description from the page. Returns 1 if updated else 0."""
    try:
        resource = Resource.objects.get(id=resource_id)
    except Resource.DoesNotExist:
        return 0

    if resource.thumbnail and resource.description:
        return 0

    try:
        meta = fetch_metadata(resource.url)
    except ScrapeError as exc:
        logger.warning("Metadata backfill for resource id=%s failed: %s", resource_id, exc.detail)
        return 0

    updated = []
    if not resource.thumbnail and meta.thumbnail:
        resource.thumbnail = meta.thumbnail[:500]
        updated.append("thumbnail")
    if not resource.description and meta.description:
        resource.description = meta.description
        updated.append("description")
    if not updated:
        return 0

    resource.save(update_fields=[*updated, "updated_at"])
    return 1
