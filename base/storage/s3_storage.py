from django.conf import settings

from storages.backends.s3boto3 import S3Boto3Storage


class MediaStorage(S3Boto3Storage):
    """S3 bucket for uploaded attachments; URLs are signed and never overwritten."""

    location = getattr(settings, "AWS_MEDIA_LOCATION", "media")
    default_acl = None
    file_overwrite = False
    querystring_auth = True
