"""
Tests for local image storage.
"""

import base64

import pytest

from homehub.api.errors import MediaUploadError
from homehub.api.services.media_storage import MediaStorage


def upload(name="photo.png", content_type="image/png", payload=b"\x89PNGdata"):
    return {
        "name": name,
        "type": content_type,
        "data": f"data:{content_type};base64,{base64.b64encode(payload).decode()}",
    }


@pytest.fixture
def storage(tmp_path):
    return MediaStorage(root=str(tmp_path), base_url="https://cdn.example.com/media/")


def test_save_images_writes_files_and_urls(storage, tmp_path):
    stored = storage.save_images("user-1", [upload("Front Door.png"), upload("back.jpg", "image/jpeg")])

    assert len(stored) == 2
    first = stored[0]
    assert first.storage_path.startswith("user-1/")
    assert first.storage_path.endswith("-0-Front-Door.png")
    assert first.url == f"https://cdn.example.com/media/{first.storage_path}"
    assert (tmp_path / first.storage_path).read_bytes() == b"\x89PNGdata"
    assert "-1-back.jpg" in stored[1].storage_path


def test_content_type_from_data_url_prefix(storage):
    image = upload()
    image["type"] = ""
    assert len(storage.save_images("u", [image])) == 1


def test_non_image_is_refused_and_partial_upload_removed(storage, tmp_path):
    with pytest.raises(MediaUploadError) as exc_info:
        storage.save_images("u", [upload(), upload("notes.txt", "text/plain")])

    assert exc_info.value.message == "Image upload failed for file 2"
    assert exc_info.value.status_code == 400
    assert list((tmp_path / "u").iterdir()) == []


def test_undecodable_data_is_refused(storage):
    image = upload()
    image["data"] = "data:image/png;base64,@@not-base64@@"

    with pytest.raises(MediaUploadError, match="file 1"):
        storage.save_images("u", [image])


def test_delete_files_ignores_missing(storage):
    stored = storage.save_images("u", [upload()])

    assert storage.delete_files([stored[0].storage_path, "u/missing.png", None]) == 1
    assert storage.delete_files([stored[0].storage_path]) == 0


def test_safe_name_strips_paths_and_symbols():
    assert MediaStorage.safe_name("../../etc/passwd") == "passwd"
    assert MediaStorage.safe_name("my photo (1).jpg") == "my-photo-1-.jpg"
    assert MediaStorage.safe_name("") == "image"
