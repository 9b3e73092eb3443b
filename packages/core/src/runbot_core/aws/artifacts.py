"""Access to a build's artifact files in S3."""

from __future__ import annotations

import logging
import posixpath

from runbot_core.errors import MalformedInputError

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Artifacts of one build, stored under ``<prefix>/artifacts/<name>``."""

    def __init__(self, client, bucket: str, prefix: str):
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    def key(self, name: str) -> str:
        return posixpath.join(self.prefix, "artifacts", name)

    def url(self, name: str) -> str:
        return f"https://{self.bucket}.s3.amazonaws.com/{self.key(name)}"

    def read_text(self, name: str) -> str:
        obj = self.client.get_object(Bucket=self.bucket, Key=self.key(name))
        return obj["Body"].read().decode("utf-8", errors="replace").strip()

    def read_int(self, name: str) -> int:
        text = self.read_text(name)
        try:
            return int(text)
        except ValueError:
            raise MalformedInputError(f"Artifact {name} is not an integer: {text!r}")

    def set_content_type(self, name: str, content_type: str) -> None:
        """Rewrite the object's metadata in place so browsers render it instead of downloading it."""
        key = self.key(name)
        self.client.copy_object(
            Bucket=self.bucket,
            Key=key,
            CopySource={"Bucket": self.bucket, "Key": key},
            ContentType=content_type,
            MetadataDirective="REPLACE",
        )
        logger.debug("Set %s on s3://%s/%s", content_type, self.bucket, key)
