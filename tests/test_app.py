"""Application wiring: health, metrics, headers, seeding and configuration."""

from dataclasses import replace

from catalog.app import create_app
from catalog.common.config import Settings, _get_bool
from catalog.seed import SAMPLE_PRODUCTS, seed_products


class TestApplication:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert await response.get_json() == {"status": "ok"}

    async def test_instance_header(self, client):
        response = await client.get("/api/productos")

        assert response.headers["X-Instance-ID"] == "test-instance"

    async def test_metrics_label_by_url_rule(self, client):
        await client.get("/api/productos/12345")

        response = await client.get("/metrics")
        text = await response.get_data(as_text=True)

        assert response.status_code == 200
        assert "http_requests_total" in text
        assert 'endpoint="/api/productos/<product_id>"' in text
        assert 'endpoint="/api/productos/12345"' not in text

    async def test_seed_on_startup(self, settings):
        app = create_app(replace(settings, SEED_ON_STARTUP=True))

        async with app.test_app() as test_app:
            response = await test_app.test_client().get("/api/productos/count")

            assert await response.get_json() == len(SAMPLE_PRODUCTS)


class TestSeeding:
    async def test_seed_skips_existing_names(self, session_factory, repository):
        first = await seed_products(session_factory)
        second = await seed_products(session_factory)

        assert first == len(SAMPLE_PRODUCTS)
        assert second == 0
        assert await repository.count() == len(SAMPLE_PRODUCTS)


class TestSettings:
    def test_get_bool(self, monkeypatch):
        monkeypatch.setenv("CATALOG_FLAG", "Yes")
        assert _get_bool("CATALOG_FLAG") is True

        monkeypatch.setenv("CATALOG_FLAG", "off")
        assert _get_bool("CATALOG_FLAG", True) is False

        monkeypatch.delenv("CATALOG_FLAG")
        assert _get_bool("CATALOG_FLAG", True) is True

    def test_overrides(self):
        settings = Settings(DB_URL="sqlite+aiosqlite:///tmp/other.db", APP_PORT=9000)

        assert settings.DB_URL == "sqlite+aiosqlite:///tmp/other.db"
        assert settings.APP_PORT == 9000
