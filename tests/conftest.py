"""Shared fixtures for the pypcloud tests."""

from __future__ import annotations

import re

import httpx
import pytest

from pypcloud.native import PCloudClient, SessionManager

HOST = "https://api.pcloud.com"
ACCESS_TOKEN = "test_access_token"
SESSION_TOKEN = "test_session_token"


def api_url(endpoint: str, host: str = HOST) -> re.Pattern[str]:
    """Match an API endpoint with any query string."""
    return re.compile(rf"{re.escape(host)}/{endpoint}(\?.*)?$")


def file_metadata(file_id: int = 1234, name: str = "cat.jpg", **extra: object) -> dict:
    return {
        "isfolder": False,
        "name": name,
        "id": f"f{file_id}",
        "fileid": file_id,
        "parentfolderid": 0,
        "size": 2048,
        "contenttype": "image/jpeg",
        "hash": 99,
        "created": "Sat, 24 Jul 2010 14:29:47 +0000",
        "modified": "Sat, 24 Jul 2010 14:29:47 +0000",
        **extra,
    }


def folder_metadata(folder_id: int = 42, name: str = "Photos", **extra: object) -> dict:
    return {
        "isfolder": True,
        "name": name,
        "id": f"d{folder_id}",
        "folderid": folder_id,
        "parentfolderid": 0,
        **extra,
    }


@pytest.fixture
def client() -> PCloudClient:
    """Create a client authenticating with a bearer token, without endpoint selection."""
    return PCloudClient(HOST, httpx.AsyncClient(), SessionManager.stateless(ACCESS_TOKEN))
