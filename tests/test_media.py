"""
Tests for upload staging and the product image store.
"""

import io

import pytest
from starlette.datastructures import UploadFile

from catalog_api.services.media import ImageStore, UploadStager
from catalog_shared.utils.exceptions import ImageStorageError


class TestUploadStager:
    """Tests for UploadStager.stage() / discard()"""

    @pytest.mark.asyncio
    async def test_stage_preserves_order(self, upload_stager, upload_dir):
        files = [
            UploadFile(file=io.BytesIO(b"first"), filename="a.png"),
            UploadFile(file=io.BytesIO(b"second"), filename="b.jpg"),
        ]

        staged = await upload_stager.stage(files)

        assert [u.original_name for u in staged] == ["a.png", "b.jpg"]
        assert staged[0].temp_path.read_bytes() == b"first"
        assert staged[1].temp_path.read_bytes() == b"second"
        assert staged[0].storage_name != staged[1].storage_name
        assert all(u.temp_path.parent == upload_dir for u in staged)

    @pytest.mark.asyncio
    async def test_stage_creates_directory(self, tmp_path):
        stager = UploadStager(tmp_path / "nested" / "tmp")

        staged = await stager.stage([UploadFile(file=io.BytesIO(b"x"), filename="a.png")])

        assert staged[0].temp_path.is_file()

    @pytest.mark.asyncio
    async def test_stage_nothing(self, upload_stager):
        assert await upload_stager.stage([]) == []

    @pytest.mark.asyncio
    async def test_discard_counts_remaining_files(self, upload_stager):
        staged = await upload_stager.stage([
            UploadFile(file=io.BytesIO(b"x"), filename="a.png"),
            UploadFile(file=io.BytesIO(b"y"), filename="b.png"),
        ])
        staged[0].temp_path.unlink()

        assert await upload_stager.discard(staged) == 1
        assert not staged[1].temp_path.exists()


class TestImageStore:
    """Tests for ImageStore"""

    def test_permanent_name(self, make_upload):
        upload = make_upload("photo.final.PNG")

        assert ImageStore.permanent_name(upload) == f"{upload.storage_name}.PNG"

    def test_permanent_name_strips_unsafe_characters(self, make_upload):
        upload = make_upload("evil.p/n\\g")

        assert ImageStore.permanent_name(upload) == f"{upload.storage_name}.png"

    def test_permanent_name_without_dot(self, make_upload):
        upload = make_upload("photo")

        assert ImageStore.permanent_name(upload) == f"{upload.storage_name}.photo"

    @pytest.mark.asyncio
    async def test_store_moves_file(self, image_store, image_dir, make_upload):
        upload = make_upload("a.png", b"pixels")

        filename = await image_store.store(upload)

        assert (image_dir / filename).read_bytes() == b"pixels"
        assert not upload.temp_path.exists()

    @pytest.mark.asyncio
    async def test_store_missing_source(self, image_store, image_dir, make_upload):
        upload = make_upload("a.png")
        upload.temp_path.unlink()

        with pytest.raises(ImageStorageError) as exc_info:
            await image_store.store(upload)

        assert exc_info.value.status_code == 500
        assert list(image_dir.iterdir()) == []

    def test_remove(self, image_store, image_dir):
        (image_dir / "a.png").write_bytes(b"x")

        assert image_store.remove("a.png") is True
        assert not (image_dir / "a.png").exists()

    def test_remove_missing_is_not_an_error(self, image_store):
        assert image_store.remove("missing.png") is False

    def test_remove_refuses_paths(self, image_store, tmp_path):
        outside = tmp_path / "keep.txt"
        outside.write_text("keep")

        assert image_store.remove("../../../keep.txt") is False
        assert outside.exists()

    def test_path_for_rejects_directories(self, image_store):
        with pytest.raises(ValueError):
            image_store.path_for("../a.png")

    @pytest.mark.asyncio
    async def test_remove_many(self, image_store, image_dir):
        for name in ("a.png", "b.png"):
            (image_dir / name).write_bytes(b"x")

        removed = await image_store.remove_many(["a.png", "b.png", "c.png", ""])

        assert removed == 2
        assert list(image_dir.iterdir()) == []

    def test_filenames(self, image_store, image_dir):
        (image_dir / "a.png").write_bytes(b"x")
        (image_dir / "sub").mkdir()

        assert image_store.filenames() == {"a.png"}

    def test_filenames_missing_directory(self, tmp_path):
        assert ImageStore(tmp_path / "nope").filenames() == set()
