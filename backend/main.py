from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os

from .config import settings
from .database import engine, Base
from .routers import materials, stairs, products, jobs, tax_rates, stair_configurations

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("millwork")

BASE_REVISION = "4f1c2a9b7d30"

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)


def _run_migrations():
    """Run pending Alembic migrations on startup.

    Databases built by Base.metadata.create_all() have the tables but no
    alembic_version row; those get the base revision stamped first.
    """
    try:
        from alembic.config import Config
        from alembic import command
        from sqlalchemy import inspect

        alembic_ini = os.path.join(os.path.dirname(__file__), "..", "alembic.ini")
        if not os.path.exists(alembic_ini):
            logger.info("alembic.ini not found, skipping migrations")
            return

        alembic_cfg = Config(alembic_ini)
        alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

        insp = inspect(engine)
        has_alembic = "alembic_version" in insp.get_table_names()
        has_catalog = "stair_price_rules" in insp.get_table_names()

        if not has_alembic and has_catalog:
            logger.info("Stamping base migration %s (tables already exist)", BASE_REVISION)
            command.stamp(alembic_cfg, BASE_REVISION)

        logger.info("Running pending Alembic migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Migrations complete")

    except Exception as e:
        # Never let migration errors prevent app startup
        logger.warning(f"Alembic migration warning: {e}")


app = FastAPI(
    title="Millwork Quoting App",
    description="Stair parts and millwork pricing for quotes, orders and invoices",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(stairs.router, prefix="/api")
app.include_router(products.router, prefix="/api")
app.include_router(materials.router, prefix="/api")
app.include_router(jobs.router, prefix="/api")
app.include_router(tax_rates.router, prefix="/api")
app.include_router(stair_configurations.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "millwork-quoting-app"}


@app.on_event("startup")
def auto_migrate():
    """Run pending Alembic migrations on startup."""
    _run_migrations()


@app.on_event("startup")
def auto_seed():
    """Seed materials, the stair catalog and products on first run."""
    if not settings.SEED_CATALOG_ON_STARTUP:
        return
    from .database import SessionLocal
    db = SessionLocal()
    try:
        seeded = materials.seed_materials(db)
        seeded += stairs.seed_stair_catalog(db)
        seeded += products.seed_products(db)
        if seeded:
            logger.info("Seeded %d catalog rows", seeded)
    finally:
        db.close()
