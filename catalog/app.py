import logging
import time
from typing import Optional

from quart import Quart, jsonify, request

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .common.config import Settings, settings as default_settings
from .common.database import build_engine, build_session_factory, init_db
from .products.controller import create_blueprint
from .products.repository import ProductRepository
from .products.service import ProductService
from .seed import seed_products


log = logging.getLogger(__name__)

# Basic metrics with proper buckets for latency
REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"])
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0, float("inf"))
)


def create_app(settings: Optional[Settings] = None) -> Quart:
    settings = settings or default_settings

    app = Quart(__name__)
    app.config["CATALOG_SETTINGS"] = settings

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    service = ProductService(ProductRepository(session_factory))

    # Blueprints
    app.register_blueprint(create_blueprint(service))

    @app.before_request
    async def before_request():
        request._start_time = time.time()
        log.debug(f"[Instance {settings.INSTANCE_ID}] {request.method} {request.path}")

    @app.after_request
    async def after_request(response):
        try:
            if hasattr(request, "_start_time"):
                duration = time.time() - request._start_time

                # Label by URL rule to keep label cardinality bounded
                endpoint = request.url_rule.rule if request.url_rule is not None else "<unmatched>"

                REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
                REQUEST_COUNT.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=str(response.status_code)
                ).inc()

            response.headers['X-Instance-ID'] = settings.INSTANCE_ID
        except Exception as e:
            log.error(f"Error recording metrics: {e}")
        return response

    @app.get("/metrics")
    async def metrics():
        data = generate_latest()
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        return jsonify({"status": "ok"})

    @app.before_serving
    async def startup():
        logging.basicConfig(level=settings.LOG_LEVEL.upper())
        log.info("Initializing database...")
        await init_db(engine)
        if settings.SEED_ON_STARTUP:
            added = await seed_products(session_factory)
            log.info("Seeded %s sample products.", added)
        log.info("Database ready.")

    @app.after_serving
    async def shutdown():
        await engine.dispose()
        log.info("Shutdown complete.")

    return app
