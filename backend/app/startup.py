"""
Application startup checks and initialization.

Configures logging, verifies the database is reachable and creates the
order and menu tables before the app starts serving requests.
"""

import logging
import sys
from typing import List, Tuple
from sqlalchemy import text
import sqlalchemy as sa

from core.config import settings
from core.database import engine, Base

logger = logging.getLogger(__name__)

REQUIRED_TABLES = (
    "menu_items",
    "orders",
    "order_items",
    "order_status_history",
    "order_sequences",
)


def configure_startup_logging():
    """Configure logging for startup"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_tables():
    """Create any missing tables for the registered models"""
    # models register themselves on Base.metadata when imported
    from modules.menu.models import menu_models  # noqa: F401
    from modules.orders.models import order_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_database_connection(self) -> bool:
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_environment_config(self) -> bool:
        if settings.is_production and settings.debug:
            self.warnings.append("DEBUG is enabled in production")
        if settings.is_production and settings.database_url.startswith("sqlite"):
            self.warnings.append("Using SQLite in production")
        if not settings.strict_status_transitions:
            self.warnings.append(
                "Order status transitions are not validated "
                "(STRICT_STATUS_TRANSITIONS=false)"
            )
        return True

    def check_required_tables(self) -> bool:
        inspector = sa.inspect(engine)
        existing_tables = inspector.get_table_names()
        missing_tables = [t for t in REQUIRED_TABLES if t not in existing_tables]
        if missing_tables:
            self.errors.append(
                f"Missing database tables: {', '.join(missing_tables)}"
            )
            return False
        return True

    def validate_all(self) -> Tuple[bool, List[str], List[str]]:
        """Run all validation checks"""
        checks = [
            ("Environment Configuration", self.check_environment_config),
            ("Database Connection", self.check_database_connection),
            ("Database Tables", self.check_required_tables),
        ]

        all_passed = True
        for check_name, check_func in checks:
            logger.info(f"Running check: {check_name}")
            if not check_func():
                all_passed = False
                # later checks need a working database
                if check_name == "Database Connection":
                    break

        return all_passed, self.errors, self.warnings


def run_startup_checks() -> Tuple[bool, List[str]]:
    """Create tables and run all validation checks"""
    logger.info("=" * 60)
    logger.info("Starting order service")
    logger.info(f"Environment: {settings.environment}")
    logger.info("=" * 60)

    create_tables()

    validator = StartupValidator()
    passed, errors, warnings = validator.validate_all()

    for warning in warnings:
        logger.warning(f"Startup warning: {warning}")
    for error in errors:
        logger.error(f"Startup error: {error}")

    if not passed and settings.is_production:
        logger.error("Cannot start in production with errors!")
        sys.exit(1)
    elif not passed:
        logger.warning("Starting in development mode despite errors")
    else:
        logger.info("All startup checks passed")

    return passed, warnings
