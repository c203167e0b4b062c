#!/usr/bin/env python3
"""Tests for the local fallback key-value stores and the id generator."""

import json
import os
import re
import shutil
import tempfile
import threading
import unittest
from unittest.mock import patch

import helpers  # noqa: F401

import redis

from storefront.app.config import Config
from storefront.data import local_store
from storefront.data.local_store import JsonFileStore, MemoryStore, RedisStore, build_local_store
from storefront.services.ids import is_order_id, new_id, to_base36


class TestJsonFileStore(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.store = JsonFileStore(self.tmpdir)

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_missing_key_reads_empty(self):
        self.assertEqual(self.store.read_all("samyra_orders"), [])

    def test_write_then_read(self):
        self.store.write_all("samyra_orders", [{"id": "ORD-1-AAAA", "customer_name": "Zoë"}])
        self.assertEqual(self.store.read_all("samyra_orders"), [{"id": "ORD-1-AAAA", "customer_name": "Zoë"}])
        self.assertTrue(os.path.exists(os.path.join(self.tmpdir, "samyra_orders.json")))

    def test_corrupt_file_reads_empty(self):
        with open(os.path.join(self.tmpdir, "samyra_orders.json"), "w", encoding="utf-8") as f:
            f.write('[{"id": "ORD-1')
        self.assertEqual(self.store.read_all("samyra_orders"), [])

    def test_non_list_payload_reads_empty(self):
        self.store.set("samyra_orders", '{"id": "ORD-1-AAAA"}')
        self.assertEqual(self.store.read_all("samyra_orders"), [])

    def test_keys_are_sanitized_to_file_names(self):
        self.store.set("user_phone_abc/../x", "+91 98")
        self.assertEqual(self.store.get("user_phone_abc/../x"), "+91 98")
        self.assertEqual(os.listdir(self.tmpdir), ["user_phone_abc_.._x.json"])

    def test_concurrent_writers_never_fail_or_corrupt(self):
        errors = []
        payloads = [json.dumps([{"id": f"ORD-{n}-AAAA", "details": "x" * 2000}]) for n in range(4)]

        def writer(payload):
            for _ in range(200):
                try:
                    self.store.set("samyra_orders", payload)
                except Exception as e:
                    errors.append(e)

        threads = [threading.Thread(target=writer, args=(p,)) for p in payloads]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(errors, [])
        self.assertIn(self.store.get("samyra_orders"), payloads)
        self.assertEqual(os.listdir(self.tmpdir), ["samyra_orders.json"])

    def test_failed_write_leaves_no_temp_file(self):
        self.store.set("samyra_orders", "[]")
        with patch.object(local_store.os, "replace", side_effect=OSError("disk full")):
            with self.assertRaises(OSError):
                self.store.set("samyra_orders", '[{"id": "ORD-1-AAAA"}]')
        self.assertEqual(os.listdir(self.tmpdir), ["samyra_orders.json"])
        self.assertEqual(self.store.read_all("samyra_orders"), [])

    def test_default_directory_is_outside_the_package(self):
        package_dir = os.path.abspath(os.path.dirname(local_store.__file__))
        store_dir = os.path.abspath(Config.LOCAL_STORE_DIR)
        storefront_dir = os.path.dirname(package_dir)
        self.assertNotEqual(os.path.commonpath([store_dir, storefront_dir]), storefront_dir)

    def test_delete(self):
        self.store.set("k", "v")
        self.store.delete("k")
        self.assertIsNone(self.store.get("k"))
        self.store.delete("k")


class TestMemoryAndRedisStores(unittest.TestCase):

    def test_memory_store(self):
        store = MemoryStore()
        store.write_all("samyra_products", [{"id": "PROD-1-AAAA"}])
        self.assertEqual(store.read_all("samyra_products"), [{"id": "PROD-1-AAAA"}])

    def test_redis_store_uses_string_values(self):
        fake = {}

        class FakeRedis:
            def get(self, key):
                return fake.get(key)

            def set(self, key, value):
                fake[key] = value

            def delete(self, key):
                fake.pop(key, None)

        store = RedisStore(client=FakeRedis())
        store.write_all("samyra_orders", [{"id": "ORD-1-AAAA"}])
        self.assertIsInstance(fake["samyra_orders"], str)
        self.assertEqual(store.read_all("samyra_orders"), [{"id": "ORD-1-AAAA"}])

    def test_store_read_errors_degrade_to_empty(self):
        class BrokenStore(MemoryStore):
            def get(self, key):
                raise OSError("disk gone")

        self.assertEqual(BrokenStore().read_all("samyra_orders"), [])

    def test_unreachable_redis_falls_back_to_memory(self):
        with patch.object(local_store.redis, "Redis") as redis_cls:
            redis_cls.return_value.ping.side_effect = redis.ConnectionError("refused")
            store = build_local_store("redis")
        self.assertIsInstance(store, MemoryStore)

    def test_memory_backend_by_name(self):
        self.assertIsInstance(build_local_store("memory"), MemoryStore)


class TestIds(unittest.TestCase):

    def test_format(self):
        for prefix in ("ORD", "PROD"):
            value = new_id(prefix)
            self.assertRegex(value, re.compile(rf"^{prefix}-[0-9A-Z]+-[0-9A-Z]{{4}}$"))

    def test_timestamp_part_is_base36_millis(self):
        self.assertEqual(new_id("ORD", now_ms=1714554000000).split("-")[1], to_base36(1714554000000))
        self.assertEqual(to_base36(0), "0")
        self.assertEqual(to_base36(35), "Z")
        self.assertEqual(to_base36(36), "10")

    def test_is_order_id(self):
        self.assertTrue(is_order_id("ORD-LVN2K8QO-7H2X"))
        self.assertFalse(is_order_id("+919876543210"))
        self.assertFalse(is_order_id("ord-lvn2k8qo-7h2x"))
        self.assertFalse(is_order_id(""))


if __name__ == '__main__':
    unittest.main()
