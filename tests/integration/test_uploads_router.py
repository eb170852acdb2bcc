"""
File: tests/integration/test_uploads_router.py
Description: 文件上传接口集成测试

测试中 UploadService 被替换为写入 tmp_path、上限 1024 字节的实例 (见 conftest)。

Author: jinmozhe
Created: 2026-03-10
"""

from pathlib import Path

import pytest
from httpx import AsyncClient

from app.domains.uploads.service import build_filename

UPLOADS = "/api/uploads"


@pytest.mark.asyncio
async def test_upload_image(
    client: AsyncClient, make_user, auth_headers, tmp_path: Path
) -> None:
    user = await make_user("alice")

    response = await client.post(
        f"{UPLOADS}/avatar",
        files={"file": ("Me.PNG", b"\x89PNG fake bytes", "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["kind"] == "avatar"
    assert data["filename"].endswith(".png")
    assert data["url"] == f"/uploads/avatar/{data['filename']}"
    assert data["size"] == len(b"\x89PNG fake bytes")

    stored = tmp_path / "uploads" / "avatar" / data["filename"]
    assert stored.read_bytes() == b"\x89PNG fake bytes"


@pytest.mark.asyncio
async def test_upload_rejects_wrong_type(client: AsyncClient, make_user, auth_headers) -> None:
    user = await make_user("alice")

    response = await client.post(
        f"{UPLOADS}/music",
        files={"file": ("song.png", b"not audio", "image/png")},
        headers=auth_headers(user),
    )

    assert response.status_code == 400
    assert response.json()["code"] == "uploads.invalid_type"


@pytest.mark.asyncio
async def test_upload_size_limits(client: AsyncClient, make_user, auth_headers) -> None:
    user = await make_user("alice")
    headers = auth_headers(user)

    too_large = await client.post(
        f"{UPLOADS}/image",
        files={"file": ("big.jpg", b"x" * 1025, "image/jpeg")},
        headers=headers,
    )
    assert too_large.status_code == 413

    empty = await client.post(
        f"{UPLOADS}/image",
        files={"file": ("empty.jpg", b"", "image/jpeg")},
        headers=headers,
    )
    assert empty.status_code == 400
    assert empty.json()["code"] == "uploads.empty_file"


@pytest.mark.asyncio
async def test_upload_requires_auth_and_known_kind(
    client: AsyncClient, make_user, auth_headers
) -> None:
    anonymous = await client.post(
        f"{UPLOADS}/image", files={"file": ("a.jpg", b"x", "image/jpeg")}
    )
    assert anonymous.status_code == 401

    user = await make_user("alice")
    unknown = await client.post(
        f"{UPLOADS}/document",
        files={"file": ("a.pdf", b"x", "application/pdf")},
        headers=auth_headers(user),
    )
    assert unknown.status_code == 400


@pytest.mark.parametrize(
    "original,suffix",
    [("photo.JPG", ".jpg"), ("noext", ""), (None, ""), ("a.verylongextension", ""), ("x.p$p", "")],
)
def test_build_filename(original, suffix) -> None:
    name = build_filename(original)

    assert name.endswith(suffix)
    assert len(name) == 32 + len(suffix)
