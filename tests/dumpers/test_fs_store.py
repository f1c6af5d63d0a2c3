import json
import unittest
from unittest.mock import patch

from src.dumpers.domain.models import PageLookupStatus, WikiPage
from src.dumpers.infrastructure.fs_store import JsonPageStore
from tests.utils.tempdir import managed_temp_dir


def make_page(page_id: int = 8) -> WikiPage:
    return WikiPage(
        page_id=page_id,
        pagename="Dragon scimitar",
        title="Dragon scimitar",
        displaytitle="Dragon scimitar",
        revid=9,
        redirects=({"pageid": 20, "ns": 0, "title": "D scim"},),
        properties=(("infobox", "Item"), ("defaultsort", "Scimitar, Dragon")),
        content="<p>A vicious, curved sword.</p>",
        raw_content="{{Infobox Item}} A vicious, curved sword. – ünïcode",
    )


class JsonPageStoreTests(unittest.TestCase):
    def test_write_uses_page_id_filename_and_schema(self):
        with managed_temp_dir("fs_store_write") as tmp:
            store = JsonPageStore(tmp)

            file_path = store.write(make_page())

            self.assertEqual(file_path, tmp / "8.json")
            self.assertTrue(store.exists(8))
            payload = json.loads(file_path.read_text(encoding="utf-8"))
            self.assertEqual(payload["pageId"], 8)
            self.assertEqual(payload["properties"][1], {"name": "defaultsort", "value": "Scimitar, Dragon"})
            self.assertIn("ünïcode", file_path.read_text(encoding="utf-8"))

    def test_lookup_round_trips_written_page(self):
        with managed_temp_dir("fs_store_lookup") as tmp:
            store = JsonPageStore(tmp)
            store.write(make_page())

            lookup = store.lookup(8)

            self.assertEqual(lookup.status, PageLookupStatus.PRESENT)
            self.assertEqual(lookup.page, make_page())

    def test_lookup_distinguishes_absent_and_corrupt(self):
        with managed_temp_dir("fs_store_tristate") as tmp:
            store = JsonPageStore(tmp)
            (tmp / "3.json").write_text("[1, 2", encoding="utf-8")
            (tmp / "4.json").write_text('{"pagename": "no id"}', encoding="utf-8")

            self.assertEqual(store.lookup(2).status, PageLookupStatus.ABSENT)
            corrupt = store.lookup(3)
            self.assertEqual(corrupt.status, PageLookupStatus.CORRUPT)
            self.assertIsNone(corrupt.page)
            self.assertIn("JSONDecodeError", corrupt.error)
            self.assertEqual(store.lookup(4).status, PageLookupStatus.CORRUPT)

    def test_lookup_reads_legacy_pageid_key(self):
        with managed_temp_dir("fs_store_legacy") as tmp:
            legacy = make_page().to_dict()
            legacy["pageid"] = legacy.pop("pageId")
            (tmp / "8.json").write_text(json.dumps(legacy), encoding="utf-8")

            self.assertEqual(JsonPageStore(tmp).lookup(8).page, make_page())

    def test_path_for_rejects_non_positive_ids(self):
        with managed_temp_dir("fs_store_path") as tmp:
            store = JsonPageStore(tmp)
            self.assertEqual(store.path_for(123), tmp / "123.json")
            with self.assertRaises(ValueError):
                store.path_for(0)

    def test_failed_write_leaves_no_page_file(self):
        with managed_temp_dir("fs_store_failed_write") as tmp:
            store = JsonPageStore(tmp)

            with patch("src.dumpers.infrastructure.fs_store.os.replace", side_effect=OSError("No space left on device")):
                with self.assertRaises(OSError):
                    store.write(make_page())

            self.assertFalse(store.exists(8))
            self.assertEqual(list(tmp.iterdir()), [])

    def test_read_only_store_does_not_create_directory(self):
        with managed_temp_dir("fs_store_read_only") as tmp:
            store = JsonPageStore(tmp / "missing", create=False)

            self.assertEqual(store.lookup(1).status, PageLookupStatus.ABSENT)
            self.assertFalse((tmp / "missing").exists())
