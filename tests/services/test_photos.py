import re

from gardenplanner.services.photos import LocalPhotoStorage, cleanup_task_photos


async def test_save_resolve_delete(tmp_path):
    source = tmp_path / "camera.jpg"
    source.write_bytes(b"\xff\xd8jpeg")
    storage = LocalPhotoStorage(tmp_path / "photos")

    filename = await storage.save(str(source), "task-1")

    assert re.fullmatch(r"task-1_\d+\.jpg", filename)
    stored = tmp_path / "photos" / filename
    assert storage.resolve_uri(filename) == str(stored)
    assert stored.read_bytes() == b"\xff\xd8jpeg"

    await storage.delete(filename)
    assert not stored.exists()


async def test_delete_missing_file_is_quiet(tmp_path):
    await LocalPhotoStorage(tmp_path).delete("never-there.jpg")


async def test_cleanup_reports_failures(tmp_path):
    class HalfBroken(LocalPhotoStorage):
        async def delete(self, filename):
            if filename.startswith("locked"):
                raise PermissionError(filename)
            await super().delete(filename)

    storage = HalfBroken(tmp_path)
    (tmp_path / "ok.jpg").write_bytes(b"x")

    failures = await cleanup_task_photos(storage, ["ok.jpg", "locked.jpg"])

    assert failures == ["locked.jpg"]
    assert not (tmp_path / "ok.jpg").exists()
