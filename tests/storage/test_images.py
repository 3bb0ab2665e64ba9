"""Tests for the local image upload handler."""

import re
from pathlib import Path

import pytest

from guildhall.config import Settings
from guildhall.services.errors import ValidationError
from guildhall.storage.images import (
    get_images_dir,
    remove_image,
    sanitize_filename,
    store_image_and_get_url,
)


class FakeUpload:
    """Minimal stand-in for an uploaded multipart file."""

    def __init__(self, filename: str | None, content: bytes):
        self.filename = filename
        self._content = content
        self._offset = 0

    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            size = len(self._content) - self._offset
        chunk = self._content[self._offset : self._offset + size]
        self._offset += len(chunk)
        return chunk


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def settings() -> Settings:
    return Settings(app_url="http://localhost:8088", public_dir="public", max_upload_size=1024)


class TestStoreImage:
    async def test_returns_url_and_writes_file(self, workdir: Path, settings: Settings) -> None:
        url = await store_image_and_get_url(FakeUpload("logo.png", b"png-bytes"), settings)

        match = re.fullmatch(r"http://localhost:8088/images/([0-9a-f-]{36})_logo\.png", url)
        assert match is not None

        stored = workdir / "public" / "images" / f"{match.group(1)}_logo.png"
        assert stored.read_bytes() == b"png-bytes"

    async def test_creates_missing_directory(self, workdir: Path, settings: Settings) -> None:
        assert not (workdir / "public").exists()
        await store_image_and_get_url(FakeUpload("a.jpg", b"x"), settings)
        assert (workdir / "public" / "images").is_dir()

    async def test_same_filename_gets_distinct_urls(
        self, workdir: Path, settings: Settings
    ) -> None:
        first = await store_image_and_get_url(FakeUpload("logo.png", b"1"), settings)
        second = await store_image_and_get_url(FakeUpload("logo.png", b"2"), settings)

        assert first != second
        assert len(list((workdir / "public" / "images").iterdir())) == 2

    async def test_large_file_streamed_in_chunks(self, workdir: Path) -> None:
        settings = Settings(public_dir="public", max_upload_size=1024 * 1024)
        content = b"a" * (200 * 1024)

        url = await store_image_and_get_url(FakeUpload("big.webp", content), settings)

        name = url.rsplit("/", 1)[1]
        assert (workdir / "public" / "images" / name).stat().st_size == len(content)

    async def test_disallowed_extension(self, workdir: Path, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="File extension '.exe' is not allowed"):
            await store_image_and_get_url(FakeUpload("virus.exe", b"x"), settings)
        assert not (workdir / "public" / "images").exists()

    async def test_svg_rejected(self, workdir: Path, settings: Settings) -> None:
        script = b"<svg xmlns=\"http://www.w3.org/2000/svg\"><script>alert(1)</script></svg>"

        with pytest.raises(ValidationError, match="File extension '.svg' is not allowed"):
            await store_image_and_get_url(FakeUpload("icon.svg", script), settings)
        assert not (workdir / "public" / "images").exists()

    async def test_oversized_upload_removed(self, workdir: Path, settings: Settings) -> None:
        with pytest.raises(ValidationError, match="exceeds maximum allowed size"):
            await store_image_and_get_url(FakeUpload("huge.png", b"x" * 2048), settings)
        assert list((workdir / "public" / "images").iterdir()) == []

    async def test_directory_components_stripped(
        self, workdir: Path, settings: Settings
    ) -> None:
        url = await store_image_and_get_url(FakeUpload("../../etc/evil.png", b"x"), settings)

        assert url.endswith("_evil.png")
        assert "/../" not in url
        assert [p.name for p in (workdir / "public" / "images").iterdir()][0].endswith(
            "_evil.png"
        )

    async def test_app_url_used_verbatim(self, workdir: Path) -> None:
        settings = Settings(app_url="https://chat.example.com", public_dir="static")
        url = await store_image_and_get_url(FakeUpload("a.gif", b"x"), settings)

        assert url.startswith("https://chat.example.com/images/")
        assert (workdir / "static" / "images").is_dir()


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("logo.png", "logo.png"),
            ("dir/logo.png", "logo.png"),
            ("..\\..\\logo.png", "logo.png"),
            (" spaced.png ", "spaced.png"),
        ],
    )
    def test_base_name(self, raw: str, expected: str) -> None:
        assert sanitize_filename(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "..", "   "])
    def test_rejects_empty(self, raw: str | None) -> None:
        with pytest.raises(ValidationError, match="Image filename is required"):
            sanitize_filename(raw)


def test_images_dir_is_under_cwd(workdir: Path, settings: Settings) -> None:
    assert get_images_dir(settings) == workdir / "public" / "images"


class TestRemoveImage:
    async def test_removes_stored_file(self, workdir: Path, settings: Settings) -> None:
        url = await store_image_and_get_url(FakeUpload("logo.png", b"x"), settings)

        remove_image(url, settings)

        assert list((workdir / "public" / "images").iterdir()) == []

    def test_missing_file_is_ignored(self, workdir: Path, settings: Settings) -> None:
        remove_image("http://localhost:8088/images/gone_logo.png", settings)

    async def test_foreign_urls_left_alone(self, workdir: Path, settings: Settings) -> None:
        await store_image_and_get_url(FakeUpload("logo.png", b"x"), settings)
        outside = workdir / "public" / "keep.png"
        outside.write_bytes(b"keep")

        remove_image("https://cdn.example.com/images/logo.png", settings)
        remove_image("http://localhost:8088/images/../keep.png", settings)

        assert outside.exists()
        assert len(list((workdir / "public" / "images").iterdir())) == 1
