"""Tests for the request builders."""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pytest
from pytest_httpx import HTTPXMock

from pypcloud.native import (
    FileDescriptor,
    InvalidOperationError,
    NoIdentifierProvided,
    PCloudClient,
    ResultCode,
    ServerError,
)

from conftest import ACCESS_TOKEN, api_url, file_metadata, folder_metadata

MTIME = datetime(2020, 1, 1, tzinfo=timezone.utc)


class TestParams:
    """Tests for building query parameters without sending anything."""

    def test_stat_by_id(self, client: PCloudClient) -> None:
        assert client.stat(12).params() == {"fileid": 12}

    def test_revision_from_descriptor(self, client: PCloudClient) -> None:
        """Test that a revision-pinned descriptor seeds revisionid."""
        assert client.checksum_file(("/a.txt", 3)).params() == {
            "path": "/a.txt",
            "revisionid": 3,
        }

    def test_with_revision_appears_once(self, client: PCloudClient) -> None:
        """Test that the last revision wins and is sent once."""
        builder = client.get_download_link_for_file((12, 3)).with_revision(7)
        params = builder.params()

        assert params["revisionid"] == 7
        assert list(params).count("revisionid") == 1

    def test_with_revision_none_removes(self, client: PCloudClient) -> None:
        builder = client.stat((12, 3)).with_revision(None)
        assert builder.params() == {"fileid": 12}

    def test_copy_file(self, client: PCloudClient) -> None:
        """Test source and target parameters of copyfile."""
        builder = (
            client.copy_file(12, "/Backup")
            .with_new_name("b.txt")
            .overwrite(False)
            .with_modification_time(MTIME)
        )

        assert builder.method == "POST"
        assert builder.params() == {
            "fileid": 12,
            "topath": "/Backup",
            "toname": "b.txt",
            "noover": "1",
            "mtime": 1577836800,
        }

    def test_overwrite_removes_noover(self, client: PCloudClient) -> None:
        """Test that switching a flag off removes it."""
        builder = client.copy_file(12, 0).overwrite(False).overwrite(True)
        assert builder.params() == {"fileid": 12, "tofolderid": 0}

    def test_move_file(self, client: PCloudClient) -> None:
        builder = client.move_file("/a.txt", 42).with_new_name("b.txt")
        assert builder.params() == {"path": "/a.txt", "tofolderid": 42, "toname": "b.txt"}

    def test_public_link_options(self, client: PCloudClient) -> None:
        """Test the options of getfilepublink."""
        builder = (
            client.get_public_link_for_file(12)
            .expire_link_after(MTIME)
            .with_max_downloads(5)
            .with_short_link(True)
            .with_password("secret")
        )

        assert builder.params() == {
            "fileid": 12,
            "expire": "Wed, 01 Jan 2020 00:00:00 +0000",
            "maxdownloads": 5,
            "shortlink": "1",
            "linkpassword": "secret",
        }

    def test_public_download_link(self, client: PCloudClient) -> None:
        builder = client.get_public_download_link("XZabc", 12)
        assert builder.params() == {"code": "XZabc", "fileid": 12}

    def test_public_download_link_needs_code(self, client: PCloudClient) -> None:
        with pytest.raises(NoIdentifierProvided):
            client.get_public_download_link("")

    def test_list_folder_flags(self, client: PCloudClient) -> None:
        builder = client.list_folder("/").recursive(True).no_files(True).no_shares(False)
        assert builder.params() == {"folderid": 0, "recursive": "1", "nofiles": "1"}

    def test_create_folder_endpoint(self, client: PCloudClient) -> None:
        """Test the endpoint switch of folder creation."""
        builder = client.create_folder("/Photos", "Cats")

        assert builder.endpoint == "createfolderifnotexists"
        assert builder.params() == {"path": "/Photos", "name": "Cats"}
        assert builder.if_not_exists(False).endpoint == "createfolder"

    def test_copy_folder_flags(self, client: PCloudClient) -> None:
        """Test that skipexisting and copycontentonly are sent when enabled."""
        builder = (
            client.copy_folder(42, "/Backup")
            .skip_existing(True)
            .copy_content_only(True)
        )
        assert builder.params() == {
            "folderid": 42,
            "topath": "/Backup",
            "skipexisting": "1",
            "copycontentonly": "1",
        }

    def test_diff_options(self, client: PCloudClient) -> None:
        builder = client.diff().after_diff_id(10).block(True).limit(50)
        assert builder.params() == {"diffid": 10, "block": "1", "limit": 50}

    def test_upload_defaults(self, client: PCloudClient) -> None:
        """Test that partial uploads are disabled by default."""
        builder = client.upload_file_into_folder("/").rename_if_exists(True)
        assert builder.params() == {"folderid": 0, "nopartial": "1", "renameifexists": "1"}


class TestValidation:
    """Tests for validation before any I/O."""

    def test_empty_copy_source(self, client: PCloudClient) -> None:
        """Test that an empty source fails at construction."""
        with pytest.raises(NoIdentifierProvided):
            client.copy_file(FileDescriptor(), "/Backup")

    def test_relative_copy_target(self, client: PCloudClient) -> None:
        with pytest.raises(InvalidOperationError):
            client.copy_file(12, "Backup")

    def test_empty_tree(self, client: PCloudClient) -> None:
        """Test that a zip link needs at least one member."""
        with pytest.raises(NoIdentifierProvided):
            client.get_zip_link(client.create_tree())


@pytest.mark.asyncio
class TestExecute:
    """Tests for sending requests."""

    async def test_stat(self, client: PCloudClient, httpx_mock: HTTPXMock) -> None:
        """Test a full round trip with credentials attached."""
        httpx_mock.add_response(
            url=api_url("stat"),
            method="GET",
            json={"result": 0, "metadata": file_metadata(12)},
        )

        stat = await client.stat(12).get()

        assert stat.metadata is not None
        assert stat.metadata.name == "cat.jpg"
        request = httpx_mock.get_requests()[0]
        assert request.url.params["fileid"] == "12"
        assert request.headers["Authorization"] == f"Bearer {ACCESS_TOKEN}"
        assert "auth" not in request.url.params

    async def test_execute_once(self, client: PCloudClient, httpx_mock: HTTPXMock) -> None:
        """Test that a builder cannot be executed twice."""
        httpx_mock.add_response(
            url=api_url("deletefile"),
            method="GET",
            json={"result": 0, "metadata": file_metadata(12, isdeleted=True)},
        )

        builder = client.delete_file(12)
        await builder.execute()

        with pytest.raises(RuntimeError):
            await builder.execute()

    async def test_error_result(self, client: PCloudClient, httpx_mock: HTTPXMock) -> None:
        """Test that non-OK results raise the family error."""
        httpx_mock.add_response(
            url=api_url("checksumfile"),
            method="GET",
            json={"result": 5000, "error": "Internal error."},
        )

        with pytest.raises(ServerError) as exc_info:
            await client.checksum_file(12).get()
        assert exc_info.value.code is ResultCode.INTERNAL_ERROR

    async def test_copy_file_is_post(
        self, client: PCloudClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=api_url("copyfile"),
            method="POST",
            json={"result": 0, "metadata": file_metadata(13)},
        )

        stat = await client.copy_file(12, 42).execute()

        assert stat.metadata is not None
        assert stat.metadata.fileid == 13

    async def test_delete_folder_recursive(
        self, client: PCloudClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=api_url("deletefolderrecursive"),
            method="GET",
            json={"result": 0, "deletedfiles": 3, "deletedfolders": 1},
        )

        deleted = await client.delete_folder(42).delete_recursive()

        assert deleted.deletedfiles == 3

    async def test_delete_folder_not_empty(
        self, client: PCloudClient, httpx_mock: HTTPXMock
    ) -> None:
        httpx_mock.add_response(
            url=api_url("deletefolder"),
            method="GET",
            json={"result": 2006, "error": "Folder is not empty."},
        )

        with pytest.raises(InvalidOperationError) as exc_info:
            await client.delete_folder(42).delete_if_empty()
        assert exc_info.value.code is ResultCode.FOLDER_IS_NOT_EMPTY

    async def test_empty_upload_sends_nothing(
        self, client: PCloudClient, httpx_mock: HTTPXMock
    ) -> None:
        """Test that uploading no files succeeds without a request."""
        uploaded = await client.upload_file_into_folder("/Photos").upload()

        assert uploaded.is_ok
        assert uploaded.fileids == []
        assert uploaded.metadata == []
        assert httpx_mock.get_requests() == []

    async def test_upload(self, client: PCloudClient, httpx_mock: HTTPXMock) -> None:
        """Test a multipart upload."""
        httpx_mock.add_response(
            url=api_url("uploadfile"),
            method="POST",
            json={"result": 0, "fileids": [77], "metadata": [file_metadata(77, "a.txt")]},
        )

        uploaded = await (
            client.upload_file_into_folder(42)
            .with_file("a.txt", io.BytesIO(b"hello"))
            .upload()
        )

        assert uploaded.fileids == [77]
        request = httpx_mock.get_requests()[0]
        assert request.url.params["folderid"] == "42"
        assert request.url.params["nopartial"] == "1"
        assert b"hello" in request.read()
        assert b'filename="a.txt"' in request.read()

    async def test_zip_link(self, client: PCloudClient, httpx_mock: HTTPXMock) -> None:
        """Test a tree resolved to ids and sent as zip link."""
        httpx_mock.add_response(
            url=api_url("stat"),
            method="GET",
            json={"result": 0, "metadata": folder_metadata(42)},
        )
        httpx_mock.add_response(
            url=api_url("getziplink"),
            method="GET",
            json={"result": 0, "path": "/zip/x.zip", "hosts": ["c1.pcloud.com"]},
        )

        tree = client.create_tree()
        await tree.with_folder("/Photos")
        await tree.with_file(12)
        await tree.without_file(13)
        link = await client.get_zip_link(tree).with_filename("photos.zip").get()

        assert link.url == "https://c1.pcloud.com/zip/x.zip"
        params = httpx_mock.get_requests()[1].url.params
        assert params["folderids"] == "42"
        assert params["fileids"] == "12"
        assert params["excludefileids"] == "13"
        assert params["filename"] == "photos.zip"
