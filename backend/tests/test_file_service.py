"""
Alpha Tower Backend — File Service Unit Tests
===============================================

What:  Tests for FileService validation (extension, size), storage,
       path resolution and cleanup.
How:   Every test gets its own FileService over a temporary upload root.

Test Strategy:
    ✅ Allowed extensions (.png, .jpg, .jpeg, .gif), case-insensitive
    ✅ Rejected extensions (.pdf, .exe, none)
    ✅ Size limits (empty, boundary, over)
    ✅ Stored names are unique and sanitized
    ✅ Paths escaping the upload root are refused
"""

import pytest

from alpha_tower.exceptions import BadRequestError, NotFoundError
from alpha_tower.services.file_service import FileService


class TestFileValidation:
    """Tests for file validation logic in FileService."""

    @pytest.fixture(autouse=True)
    def _service(self, tmp_path):
        self.service = FileService(upload_directory=str(tmp_path), max_size=1024)

    # ── Extension Validation ──────────────────────────────────────────────

    @pytest.mark.parametrize("filename", ["me.png", "me.jpg", "me.jpeg", "me.gif"])
    def test_validate_extension_allowed(self, filename):
        assert self.service.validate_extension(filename) == filename[filename.rindex("."):]

    def test_validate_extension_uppercase(self):
        """Extension check should be case-insensitive."""
        assert self.service.validate_extension("photo.JPG") == ".jpg"
        assert self.service.validate_extension("photo.Png") == ".png"

    @pytest.mark.parametrize("filename", ["document.pdf", "malware.exe", "noextension"])
    def test_validate_extension_rejected(self, filename):
        with pytest.raises(BadRequestError, match="not supported"):
            self.service.validate_extension(filename)

    # ── Size Validation ───────────────────────────────────────────────────

    def test_validate_size_at_limit(self):
        self.service.validate_size(1024)

    def test_validate_size_over_limit(self):
        with pytest.raises(BadRequestError, match="too large"):
            self.service.validate_size(1025)

    def test_validate_size_empty_file(self):
        with pytest.raises(BadRequestError, match="empty"):
            self.service.validate_size(0)


class TestFileStorage:

    @pytest.fixture(autouse=True)
    def _service(self, tmp_path):
        self.root = tmp_path
        self.service = FileService(upload_directory=str(tmp_path), max_size=1024)

    def test_generated_names_are_unique_and_sanitized(self):
        first = self.service.generate_filename("../../etc/my photo.png")
        second = self.service.generate_filename("../../etc/my photo.png")

        assert first != second
        assert first.endswith("-my_photo.png")
        assert "/" not in first

    @pytest.mark.asyncio
    async def test_validate_and_store_writes_file(self, sample_image_bytes):
        stored = await self.service.validate_and_store("profile.png", sample_image_bytes)

        assert stored.endswith("-profile.png")
        assert (self.root / stored).read_bytes() == sample_image_bytes

    @pytest.mark.asyncio
    async def test_invalid_upload_writes_nothing(self):
        with pytest.raises(BadRequestError):
            await self.service.validate_and_store("notes.txt", b"hello")

        assert list(self.root.iterdir()) == []

    def test_resolve_path_rejects_traversal(self):
        with pytest.raises(BadRequestError, match="Invalid file path"):
            self.service.resolve_path("../outside.png")

    def test_open_stored_missing_file(self):
        with pytest.raises(NotFoundError, match="File not found."):
            self.service.open_stored("nothing-here.png")

    # ── Cleanup ───────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self):
        test_file = self.root / "old.png"
        test_file.write_bytes(b"test content")

        await self.service.cleanup_file("old.png")
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self):
        """cleanup_file should not raise for files that are already gone."""
        await self.service.cleanup_file("nonexistent.jpg")

    @pytest.mark.asyncio
    async def test_cleanup_never_leaves_upload_root(self, tmp_path_factory):
        outside = tmp_path_factory.mktemp("elsewhere") / "keep.png"
        outside.write_bytes(b"x")

        await self.service.cleanup_file(str(outside))
        assert outside.exists()
