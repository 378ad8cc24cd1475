from rest_framework import serializers

from apps.projects.models import TaskAttachment
from base.serializers import UserBasicSerializer


def validate_upload_size(uploaded_file, storage):
    max_size = storage.max_upload_size
    if uploaded_file.size > max_size:
        raise serializers.ValidationError(
            f"File size cannot exceed {max_size // (1024 * 1024)}MB"
        )
    return uploaded_file


class TaskAttachmentSerializer(serializers.ModelSerializer):
    uploaded_by = UserBasicSerializer(read_only=True)
    file_url = serializers.ReadOnlyField()
    file_size_mb = serializers.ReadOnlyField()

    class Meta:
        model = TaskAttachment
        fields = [
            "id",
            "filename",
            "original_name",
            "file_size",
            "file_size_mb",
            "mime_type",
            "file_url",
            "uploaded_by",
            "uploaded_at",
        ]
        read_only_fields = fields


class TaskAttachmentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()

    def validate_file(self, value):
        return validate_upload_size(value, self.context["attachment_storage"])
