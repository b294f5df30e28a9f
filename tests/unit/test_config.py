"""Unit tests for ApplicationConfig defaults"""

from config import ApplicationConfig


class TestApplicationConfig:
    def test_database_uris_use_async_drivers(self):
        uris = {name: value for name, value in vars(ApplicationConfig).items() if name.endswith("_URI")}

        assert list(uris) == ["DB_URI"]
        assert "+aiosqlite" in uris["DB_URI"] or "+asyncpg" in uris["DB_URI"]

    def test_page_size_defaults(self):
        assert 1 <= ApplicationConfig.DEFAULT_PAGE_SIZE <= ApplicationConfig.MAX_PAGE_SIZE
