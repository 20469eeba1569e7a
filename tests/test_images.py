import io

import pytest
from PIL import Image

from core.errors import BackendError, ErrorKind
from core.images import (
    decode_thumbnail,
    read_image_info,
    render_thumbnail,
    validate_image,
    validate_images,
)


@pytest.mark.parametrize("name", ["a.png", "b.jpg", "c.jpeg", "d.bmp", "e.gif", "f.tiff", "g.tif", "h.webp"])
def test_supported_formats_validate(make_image, name):
    path = make_image(name)
    assert validate_image(path) > 0


def test_missing_file(tmp_path):
    with pytest.raises(BackendError) as excinfo:
        validate_image(str(tmp_path / "nope.png"))
    assert excinfo.value.kind == ErrorKind.IMAGE_NOT_FOUND


def test_unsupported_extension(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("hello")
    with pytest.raises(BackendError) as excinfo:
        validate_image(str(path))
    assert excinfo.value.kind == ErrorKind.UNSUPPORTED_FORMAT


def test_empty_file(tmp_path):
    path = tmp_path / "empty.png"
    path.write_bytes(b"")
    with pytest.raises(BackendError) as excinfo:
        validate_image(str(path))
    assert excinfo.value.kind == ErrorKind.IMAGE_READ_ERROR


def test_corrupt_file(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"definitely not a jpeg")
    with pytest.raises(BackendError) as excinfo:
        validate_image(str(path))
    assert excinfo.value.kind == ErrorKind.IMAGE_READ_ERROR


def test_too_large(make_image):
    path = make_image("big.png", size=(200, 200))
    with pytest.raises(BackendError) as excinfo:
        validate_image(path, max_bytes=10)
    assert excinfo.value.kind == ErrorKind.IMAGE_TOO_LARGE


def test_validate_images_splits_results(make_image, tmp_path):
    good = make_image("ok.png")
    bad = str(tmp_path / "missing.png")

    result = validate_images([bad, good])

    assert result.valid == [good]
    assert [i.path for i in result.invalid] == [bad]
    assert result.invalid[0].error.startswith("Image file not found")


def test_read_image_info(make_image):
    path = make_image("photo.jpeg", size=(64, 48))
    info = read_image_info(path)
    assert (info.width, info.height) == (64, 48)
    assert info.format == "JPEG"
    assert info.size_bytes > 0


def test_thumbnail_is_png_data_url_within_bounds(make_image):
    path = make_image("wide.png", size=(400, 100))
    data_url = render_thumbnail(path, 96)

    assert data_url.startswith("data:image/png;base64,")
    with Image.open(io.BytesIO(decode_thumbnail(data_url))) as thumb:
        assert thumb.format == "PNG"
        assert thumb.size == (96, 24)


def test_thumbnail_keeps_transparency(make_image):
    path = make_image("alpha.png", size=(20, 20), mode="RGBA", color=(0, 0, 0, 0))
    with Image.open(io.BytesIO(decode_thumbnail(render_thumbnail(path)))) as thumb:
        assert thumb.mode == "RGBA"


def test_thumbnail_unreadable(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"garbage")
    with pytest.raises(BackendError):
        render_thumbnail(str(path))
