"""
Application startup validation and logging setup.

Checks run once when the app starts so misconfiguration shows up in the
logs before the first split request does.
"""

import logging
import sys
from typing import List, Tuple

import sqlalchemy as sa
from sqlalchemy import text

from core.config import settings, validate_production_config
from core.database import engine

logger = logging.getLogger(__name__)


class StartupValidator:
    """Validates application startup requirements"""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def check_environment_config(self) -> bool:
        """Validate environment configuration"""
        try:
            validate_production_config(settings)
        except ValueError as e:
            self.errors.append(f"Configuration validation failed: {str(e)}")
            return False

        if not settings.order_engine_api_key:
            self.warnings.append("ORDER_ENGINE_API_KEY not set - completion calls are unauthenticated")
        return True

    def check_database_connection(self) -> bool:
        """Check database connectivity"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
            logger.info("Database connection successful")
            return True
        except sa.exc.SQLAlchemyError as e:
            self.errors.append(f"Database connection failed: {str(e)}")
            return False

    def check_required_tables(self) -> bool:
        """Check that the orders table exists"""
        try:
            if "orders" not in sa.inspect(engine).get_table_names():
                self.warnings.append(
                    "Missing database table: orders. Run migrations with: alembic upgrade head"
                )
        except sa.exc.SQLAlchemyError as e:
            self.warnings.append(f"Could not check database tables: {str(e)}")
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

        return all_passed, self.errors, self.warnings


def run_startup_checks() -> Tuple[bool, List[str]]:
    """Run all startup validation checks"""
    logger.info(f"Starting split bill service ({settings.environment})")

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


def configure_startup_logging():
    """Configure logging for the process"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
