import boto3
from botocore.exceptions import ClientError
from sportsme.config import settings
from supabase import Client
import logging

logger = logging.getLogger(__name__)


class S3AttachmentStorage:
    def __init__(self):
        if not settings.s3_configured:
            raise ValueError("AWS S3 credentials and bucket name must be configured")

        self.s3_client = boto3.client(
            's3',
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )
        self.bucket_name = settings.s3_bucket_name

    def public_url(self, key: str) -> str:
        return f"https://{self.bucket_name}.s3.{settings.aws_region}.amazonaws.com/{key}"

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Upload file to S3 and return its public URL"""
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type
            )
        except ClientError as e:
            logger.error(f"Failed to upload file to S3: {str(e)}")
            raise
        return self.public_url(key)


class SupabaseAttachmentStorage:
    def __init__(self, supabase: Client, bucket: str):
        self.supabase = supabase
        self.bucket = bucket

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        """Upload file to the Supabase Storage bucket and return its public URL"""
        bucket = self.supabase.storage.from_(self.bucket)
        bucket.upload(key, content, file_options={"content-type": content_type})
        return bucket.get_public_url(key)


def get_attachment_storage(supabase: Client):
    """S3 when configured, otherwise the Supabase Storage attachments bucket"""
    if settings.s3_configured:
        try:
            storage = S3AttachmentStorage()
            logger.info("S3 attachment storage initialized")
            return storage
        except Exception as e:
            logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
    return SupabaseAttachmentStorage(supabase, settings.attachments_bucket)
