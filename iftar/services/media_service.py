from io import BytesIO
from uuid import uuid4

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app
from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from iftar.errors import AppError, UpstreamError

ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "gif"}
MAX_WIDTH = 1200
WEBP_QUALITY = 80
CACHE_CONTROL = "public, max-age=31536000"


class MediaService:
    @staticmethod
    def _is_allowed(filename):
        return "." in filename and filename.rsplit(".", 1)[1].lower() in ALLOWED_EXTENSIONS

    @staticmethod
    def compress_image(data: bytes) -> bytes:
        """Re-encode an upload as WebP, at most MAX_WIDTH pixels wide."""
        # Verify actual image bytes to avoid extension spoofing.
        try:
            Image.open(BytesIO(data)).verify()
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise AppError("Invalid image file.", 400) from exc

        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if "transparency" in image.info else "RGB")
        if image.width > MAX_WIDTH:
            height = round(image.height * MAX_WIDTH / image.width)
            image = image.resize((MAX_WIDTH, height), Image.LANCZOS)

        output = BytesIO()
        image.save(output, format="WEBP", quality=WEBP_QUALITY)
        return output.getvalue()

    @staticmethod
    def _s3_client():
        config = current_app.config
        return boto3.client(
            "s3",
            endpoint_url=config.get("S3_API_ENDPOINT"),
            aws_access_key_id=config.get("S3_ACCESS_KEY_ID"),
            aws_secret_access_key=config.get("S3_SECRET_ACCESS_KEY"),
            region_name="auto",
        )

    @classmethod
    def upload_bytes(cls, body: bytes, key: str) -> str:
        config = current_app.config
        bucket = config.get("S3_BUCKET")
        public_url = config.get("S3_PUBLIC_URL")
        if not bucket or not public_url:
            raise UpstreamError("Image storage is not configured.")

        try:
            cls._s3_client().put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType="image/webp",
                CacheControl=CACHE_CONTROL,
            )
        except (BotoCoreError, ClientError) as exc:
            current_app.logger.warning("Image upload to %s failed: %s", key, exc)
            raise UpstreamError("Image upload failed.") from exc
        return f"{public_url.rstrip('/')}/{key}"

    @classmethod
    def upload_image(cls, storage: FileStorage):
        if not storage or not storage.filename:
            raise AppError("An image file is required.", 400)

        filename = secure_filename(storage.filename)
        if not filename or not cls._is_allowed(filename):
            raise AppError("Unsupported image format.", 400)

        original = storage.read()
        compressed = cls.compress_image(original)
        key = f"places/{uuid4().hex}.webp"
        url = cls.upload_bytes(compressed, key)
        current_app.logger.info("Uploaded %s (%d -> %d bytes)", key, len(original), len(compressed))
        return {"url": url, "originalSize": len(original), "compressedSize": len(compressed)}
