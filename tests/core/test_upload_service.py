import pytest
from unittest.mock import MagicMock, ANY

from blog_portal.core.exception import ApiError
from blog_portal.core.upload_service import (INVALID_TYPE_MESSAGE, MAX_IMAGE_SIZE, NO_URL_MESSAGE,
                                             TOO_LARGE_MESSAGE, UploadService, extract_upload_url,
                                             validate_image_file)

UPLOAD_URL = "https://example.test/api/upload"


@pytest.fixture
def image_file(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\n" + b"0" * 64)
    return str(path)


@pytest.fixture
def mock_api_client():
    return MagicMock()


@pytest.fixture
def service(mock_api_client):
    return UploadService(api_client=mock_api_client, upload_url=UPLOAD_URL)


@pytest.mark.parametrize("name", ["a.jpg", "b.jpeg", "c.png", "d.gif", "e.webp"])
def test_allowed_image_types(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"data")
    assert validate_image_file(str(path)) is None


def test_rejects_other_types(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    assert validate_image_file(str(path)) == INVALID_TYPE_MESSAGE


def test_rejects_large_files(tmp_path):
    path = tmp_path / "big.jpg"
    with open(path, "wb") as fh:
        fh.truncate(MAX_IMAGE_SIZE + 1)
    assert validate_image_file(str(path)) == TOO_LARGE_MESSAGE


def test_exactly_max_size_is_allowed(tmp_path):
    path = tmp_path / "edge.gif"
    with open(path, "wb") as fh:
        fh.truncate(MAX_IMAGE_SIZE)
    assert validate_image_file(str(path)) is None


@pytest.mark.parametrize("result, expected", [
    ({"url": "https://a"}, "https://a"),
    ({"data": {"url": "https://b"}}, "https://b"),
    ({"file_url": "https://c"}, "https://c"),
    ({"url": "", "data": {"url": "https://b"}}, "https://b"),
    ({"message": "ok"}, None),
    ("https://raw-string", None),
])
def test_extract_upload_url(result, expected):
    assert extract_upload_url(result) == expected


def test_upload_image_success(service, mock_api_client, image_file):
    mock_api_client.post_multipart.return_value = {"data": {"url": "https://cdn/photo.png"}}
    assert service.upload_image(image_file) == "https://cdn/photo.png"
    mock_api_client.post_multipart.assert_called_once_with(
        UPLOAD_URL, {"file": ("photo.png", ANY, "image/png")}, cancel_flag=None)


def test_upload_image_without_url(service, mock_api_client, image_file):
    mock_api_client.post_multipart.return_value = {"status": "ok"}
    with pytest.raises(ApiError, match=NO_URL_MESSAGE):
        service.upload_image(image_file)


def test_upload_invalid_file_never_calls_api(service, mock_api_client, tmp_path):
    path = tmp_path / "doc.pdf"
    path.write_bytes(b"%PDF")
    with pytest.raises(ApiError):
        service.upload_image(str(path))
    mock_api_client.post_multipart.assert_not_called()
