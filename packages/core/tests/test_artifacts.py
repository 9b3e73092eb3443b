"""Tests for the S3 artifact store wrapper."""

import io
from unittest.mock import MagicMock

import pytest

from runbot_core.aws.artifacts import ArtifactStore
from runbot_core.errors import MalformedInputError


def _client(body: bytes):
    client = MagicMock()
    client.get_object.return_value = {"Body": io.BytesIO(body)}
    return client


class TestArtifactStore:
    def test_key_and_url(self):
        store = ArtifactStore(MagicMock(), "mybucket", "path/to/build")
        assert store.key("git_sha") == "path/to/build/artifacts/git_sha"
        expected = "https://mybucket.s3.amazonaws.com/path/to/build/artifacts/emacs-tests.log"
        assert store.url("emacs-tests.log") == expected

    def test_read_text_strips_whitespace(self):
        client = _client(b"  abc123\n")
        store = ArtifactStore(client, "mybucket", "p")
        assert store.read_text("git_sha") == "abc123"
        client.get_object.assert_called_once_with(Bucket="mybucket", Key="p/artifacts/git_sha")

    def test_read_int(self):
        store = ArtifactStore(_client(b"1\n"), "mybucket", "p")
        assert store.read_int("emacs-tests.exitcode") == 1

    def test_read_int_rejects_garbage(self):
        store = ArtifactStore(_client(b"not a number"), "mybucket", "p")
        with pytest.raises(MalformedInputError):
            store.read_int("emacs-tests.exitcode")

    def test_set_content_type_copies_in_place(self):
        client = MagicMock()
        ArtifactStore(client, "mybucket", "p").set_content_type("emacs-tests.log", "text/plain")
        client.copy_object.assert_called_once_with(
            Bucket="mybucket",
            Key="p/artifacts/emacs-tests.log",
            CopySource={"Bucket": "mybucket", "Key": "p/artifacts/emacs-tests.log"},
            ContentType="text/plain",
            MetadataDirective="REPLACE",
        )
