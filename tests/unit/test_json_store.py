"""JSON file store tests."""

import asyncio
import json

from storefront_localizer.services.json_store import AsyncJsonStore


class TestAsyncJsonStore:
    def test_missing_file_loads_empty(self, tmp_path):
        store = AsyncJsonStore(tmp_path / "nested" / "records.json")
        assert asyncio.run(store.load()) == {}
        assert (tmp_path / "nested").is_dir()

    def test_save_writes_file(self, tmp_path):
        path = tmp_path / "records.json"
        store = AsyncJsonStore(path)

        asyncio.run(store.save("a", {"translation": "Añadir"}))
        asyncio.run(store.save("b", {"translation": "Pagar"}))

        assert json.loads(path.read_text(encoding="utf-8")) == {
            "a": {"translation": "Añadir"},
            "b": {"translation": "Pagar"},
        }

    def test_save_replaces_record(self, tmp_path):
        store = AsyncJsonStore(tmp_path / "records.json")
        asyncio.run(store.save("a", {"v": 1}))
        asyncio.run(store.save("a", {"v": 2}))

        assert asyncio.run(AsyncJsonStore(tmp_path / "records.json").load()) == {"a": {"v": 2}}

    def test_delete(self, tmp_path):
        path = tmp_path / "records.json"
        store = AsyncJsonStore(path)
        asyncio.run(store.save("a", {"v": 1}))
        asyncio.run(store.save("b", {"v": 2}))

        assert asyncio.run(store.delete("a")) is True
        assert asyncio.run(store.delete("a")) is False
        assert json.loads(path.read_text(encoding="utf-8")) == {"b": {"v": 2}}
