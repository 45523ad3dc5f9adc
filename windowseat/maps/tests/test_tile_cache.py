#!/usr/bin/env python3
# windowseat/maps/tests/test_tile_cache.py

import json
import sys
from pathlib import Path
import threading
import unittest
from unittest.mock import MagicMock

# Add project root
project_root = Path(__file__).resolve().parent.parent.parent.parent
sys.path.append(str(project_root))

from windowseat.exceptions import ProviderError
from windowseat.maps.downloader import MapDownloader
from windowseat.maps.tile_cache import OfflineTileCache, StaticMapStrategy, TileBlobStrategy, create_tile_cache
from windowseat.route.data_models import RoutePoint
from windowseat.storage.backends import MemoryBlobStore
from windowseat.utils.tiles import TileCalculations

TEMPLATE = "https://{s}.tiles.test/{z}/{x}/{y}.png"
ROUTE = [RoutePoint(51.47, -0.4543), RoutePoint(40.6413, -73.7781)]
ZOOMS = (4, 5)


class FakeDownloader:
    """Returns fixed bytes per URL and fails for URLs containing a marker."""

    def __init__(self, fail_marker=None):
        self.fail_marker = fail_marker
        self.urls = []
        self._lock = threading.Lock()

    def fetch(self, url):
        with self._lock:
            self.urls.append(url)
        if self.fail_marker and self.fail_marker in url:
            raise ProviderError(f"HTTP 404 for {url}", status=404)
        return b'png:' + url.encode('utf-8')


class TestTileBlobStrategy(unittest.TestCase):
    def setUp(self):
        self.blobs = MemoryBlobStore()
        self.downloader = FakeDownloader()
        self.cache = OfflineTileCache(TileBlobStrategy(self.blobs, self.downloader, url_template=TEMPLATE))
        self.tiles = TileCalculations.get_tiles_for_route(ROUTE, 100000, ZOOMS)

    def test_pre_cache_stores_every_tile(self):
        progress = []
        result = self.cache.pre_cache(ROUTE, 'BA115', on_progress=progress.append, zoom_levels=ZOOMS)

        self.assertTrue(result.success)
        self.assertEqual(result.strategy, 'tiles')
        self.assertEqual(result.tiles_downloaded, len(self.tiles))
        self.assertEqual(result.tiles_failed, 0)
        self.assertEqual(result.bytes_downloaded, self.blobs.total_size('tiles/'))
        self.assertTrue(self.cache.has_offline_maps('BA115'))
        self.assertFalse(self.cache.has_offline_maps('EK002'))

        tile = self.tiles[0]
        self.assertIsNotNone(self.cache.get_cached_tile(tile.z, tile.x, tile.y))
        self.assertIsNone(self.cache.get_cached_tile(18, 0, 0))

        self.assertEqual(progress[0].status, 'preparing')
        self.assertEqual(progress[-1].status, 'downloading')
        self.assertEqual(progress[-1].current, len(self.tiles))
        self.assertEqual(progress[-1].percent, 100)

    def test_one_failure_does_not_abort_batch(self):
        failing = self.tiles[0]
        downloader = FakeDownloader(fail_marker=f"/{failing.z}/{failing.x}/{failing.y}.png")
        cache = OfflineTileCache(TileBlobStrategy(self.blobs, downloader, url_template=TEMPLATE))

        result = cache.pre_cache(ROUTE, 'BA115', zoom_levels=ZOOMS)

        self.assertFalse(result.success)
        self.assertEqual(result.tiles_failed, 1)
        self.assertEqual(result.tiles_downloaded, len(self.tiles) - 1)
        self.assertIsNone(cache.get_cached_tile(failing.z, failing.x, failing.y))

    def test_cached_tiles_are_not_downloaded_again(self):
        self.cache.pre_cache(ROUTE, 'BA115', zoom_levels=ZOOMS)
        first_downloads = len(self.downloader.urls)

        result = self.cache.pre_cache(ROUTE, 'BA117', zoom_levels=ZOOMS)

        self.assertEqual(len(self.downloader.urls), first_downloads)
        self.assertTrue(result.success)
        self.assertEqual(result.tiles_downloaded, len(self.tiles))
        self.assertTrue(self.cache.has_offline_maps('BA117'))

    def test_clear_for_flight_keeps_shared_tiles(self):
        self.cache.pre_cache(ROUTE, 'BA115', zoom_levels=ZOOMS)
        self.cache.pre_cache(ROUTE, 'BA117', zoom_levels=ZOOMS)

        self.cache.clear_for_flight('BA115')
        self.assertFalse(self.cache.has_offline_maps('BA115'))
        self.assertEqual(len(self.blobs.list_keys('tiles/')), len(self.tiles))

        self.cache.clear_for_flight('BA117')
        self.assertEqual(self.blobs.list_keys(), [])

    def test_index_records_and_sizes(self):
        self.cache.pre_cache(ROUTE, 'BA115', zoom_levels=ZOOMS)
        records = self.cache.strategy.get_flight_tiles('BA115')
        self.assertEqual(len(records), len(self.tiles))
        self.assertEqual({r.flight_id for r in records}, {'BA115'})
        self.assertEqual(self.cache.cache_size('BA115'), self.cache.cache_size())

    def test_clear_all(self):
        self.cache.pre_cache(ROUTE, 'BA115', zoom_levels=ZOOMS)
        self.blobs.put('packs/BA115.json', b'{}')
        self.cache.clear_all()
        self.assertEqual(self.blobs.list_keys(), ['packs/BA115.json'])

    def test_empty_route(self):
        result = self.cache.pre_cache([], 'BA115')
        self.assertTrue(result.success)
        self.assertEqual(result.tiles_downloaded, 0)

    def test_lookup_errors_are_contained(self):
        broken = MagicMock()
        broken.get.side_effect = OSError("unreadable")
        broken.list_keys.side_effect = OSError("unreadable")
        cache = OfflineTileCache(TileBlobStrategy(broken, self.downloader))
        self.assertIsNone(cache.get_cached_tile(4, 7, 5))
        self.assertFalse(cache.has_offline_maps('BA115'))

    def test_estimate(self):
        estimate = self.cache.estimate(ROUTE, zoom_levels=ZOOMS)
        self.assertEqual(estimate['count'], len(self.tiles))
        self.assertGreater(estimate['estimated_bytes'], 0)
        self.assertTrue(estimate['formatted'].endswith('KB') or estimate['formatted'].endswith('MB'))


class TestStaticMapStrategy(unittest.TestCase):
    def setUp(self):
        self.blobs = MemoryBlobStore()
        self.downloader = FakeDownloader()
        self.strategy = StaticMapStrategy(self.blobs, self.downloader)
        self.cache = OfflineTileCache(self.strategy)

    def test_three_maps_and_metadata(self):
        result = self.cache.pre_cache(ROUTE, 'BA115')

        self.assertTrue(result.success)
        self.assertEqual(result.strategy, 'static')
        self.assertEqual(result.tiles_downloaded, 3)
        self.assertEqual(sorted(self.blobs.list_keys('maps/BA115/')), [
            'maps/BA115/detail.png', 'maps/BA115/metadata.json',
            'maps/BA115/overview.png', 'maps/BA115/regional.png',
        ])
        metadata = json.loads(self.blobs.get('maps/BA115/metadata.json'))
        self.assertEqual([m['name'] for m in metadata['maps']], ['overview', 'regional', 'detail'])
        self.assertTrue(self.cache.has_offline_maps('BA115'))
        self.assertIsNone(self.cache.get_cached_tile(4, 7, 5))
        self.assertIsNotNone(self.strategy.get_static_map('BA115', 'overview'))

    def test_static_map_url(self):
        self.cache.pre_cache(ROUTE, 'BA115')
        url = self.downloader.urls[0]
        self.assertTrue(url.startswith('https://staticmap.openstreetmap.de/staticmap.php?'))
        self.assertIn('zoom=4', url)
        self.assertIn('size=800x600', url)
        self.assertIn('maptype=mapnik', url)
        self.assertIn('markers=51.47,-0.4543,lightblue', url)
        self.assertIn('markers=40.6413,-73.7781,lightblue', url)

    def test_partial_success_still_counts(self):
        downloader = FakeDownloader(fail_marker='zoom=8')
        cache = OfflineTileCache(StaticMapStrategy(self.blobs, downloader))
        result = cache.pre_cache(ROUTE, 'BA115')
        self.assertTrue(result.success)
        self.assertEqual(result.tiles_failed, 1)
        self.assertTrue(cache.has_offline_maps('BA115'))

    def test_all_failed(self):
        downloader = FakeDownloader(fail_marker='staticmap')
        cache = OfflineTileCache(StaticMapStrategy(self.blobs, downloader))
        result = cache.pre_cache(ROUTE, 'BA115')
        self.assertFalse(result.success)
        self.assertFalse(cache.has_offline_maps('BA115'))

    def test_short_route_and_clear(self):
        self.assertFalse(self.cache.pre_cache(ROUTE[:1], 'BA115').success)
        self.cache.pre_cache(ROUTE, 'BA115')
        self.cache.clear_for_flight('BA115')
        self.assertFalse(self.cache.has_offline_maps('BA115'))
        self.assertEqual(self.cache.cache_size(), 0)


class TestMapDownloader(unittest.TestCase):
    def test_fetch_bytes_with_timeout(self):
        session = MagicMock()
        session.get.return_value = MagicMock(ok=True, status_code=200, content=b'png')
        downloader = MapDownloader(session=session, timeout=30, retry_sleep=MagicMock())
        self.assertEqual(downloader.fetch('https://a.tiles.test/4/7/5.png'), b'png')
        self.assertEqual(session.get.call_args.kwargs['timeout'], 30)

    def test_fetch_raises_on_http_error(self):
        session = MagicMock()
        session.get.return_value = MagicMock(ok=False, status_code=404, content=b'')
        downloader = MapDownloader(session=session, retry_sleep=MagicMock())
        with self.assertRaises(ProviderError):
            downloader.fetch('https://a.tiles.test/4/7/5.png')
        self.assertEqual(session.get.call_count, 1)

    def test_each_thread_gets_its_own_session(self):
        sessions = []

        def make_session():
            session = MagicMock()
            session.get.return_value = MagicMock(ok=True, status_code=200, content=b'png')
            sessions.append(session)
            return session

        downloader = MapDownloader(retry_sleep=MagicMock(), session_factory=make_session)
        downloader.fetch('https://a.tiles.test/4/7/5.png')
        downloader.fetch('https://b.tiles.test/4/7/6.png')
        worker = threading.Thread(target=downloader.fetch, args=('https://c.tiles.test/4/7/7.png',))
        worker.start()
        worker.join()

        self.assertEqual(len(sessions), 2)
        self.assertEqual(sessions[0].get.call_count, 2)
        self.assertEqual(sessions[1].get.call_count, 1)

    def test_factory(self):
        self.assertIsInstance(create_tile_cache(MemoryBlobStore(), 'static').strategy, StaticMapStrategy)
        self.assertIsInstance(create_tile_cache(MemoryBlobStore()).strategy, TileBlobStrategy)
        with self.assertRaises(ValueError):
            create_tile_cache(MemoryBlobStore(), 'vector')


if __name__ == '__main__':
    unittest.main()
