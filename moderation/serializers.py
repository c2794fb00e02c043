from rest_framework import serializers

from .choices import ApprovalStatus

QUEUE_TYPES = ("resources", "categories", "tags")


class ApprovalTransitionSerializer(serializers.Serializer):
    """
    Body of ``POST /api/admin/approval/``.  ``type`` and ``status`` are
    validated by the transition handler so bad values surface as
    ``InvalidArgument``.
    """
    type = serializers.CharField(required=True)
    id = serializers.IntegerField(required=True)
    status = serializers.CharField(required=True)


class ApprovalQueueQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=QUEUE_TYPES, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=ApprovalStatus.values, required=False, default=ApprovalStatus.PENDING)

    def to_internal_value(self, data):
        data = data.copy()
        if data.get("status"):
            data["status"] = str(data["status"]).upper()
        return super().to_internal_value(data)
