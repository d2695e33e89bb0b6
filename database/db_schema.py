"""DuckDB schema creation and seed data for the Portfolio Status Dashboard

This module handles the local store schema: users, weekly status reports,
technical reviews and LLM configuration.
"""

from typing import Optional
import logging

from .db_connection import DatabaseConnection, get_db
from utils.auth import AVAILABLE_USERS

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE SEQUENCE IF NOT EXISTS weekly_status_report_seq START 1;
CREATE SEQUENCE IF NOT EXISTS technical_review_seq START 1;
CREATE SEQUENCE IF NOT EXISTS llm_configuration_seq START 1;

CREATE TABLE IF NOT EXISTS app_user (
  user_id BIGINT PRIMARY KEY,
  username VARCHAR NOT NULL UNIQUE,
  email VARCHAR NOT NULL UNIQUE,
  display_name VARCHAR NOT NULL,
  role VARCHAR NOT NULL DEFAULT 'project_manager',
  assessment_level VARCHAR,
  is_active BOOLEAN NOT NULL DEFAULT TRUE,
  created_at TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS weekly_status_report (
  report_id BIGINT PRIMARY KEY DEFAULT nextval('weekly_status_report_seq'),
  project_id BIGINT NOT NULL,
  reporting_date DATE NOT NULL,
  project_importance VARCHAR,
  delivery_model VARCHAR,
  rag_status VARCHAR NOT NULL,
  client_escalation BOOLEAN NOT NULL DEFAULT FALSE,
  client_escalation_details VARCHAR,
  key_weekly_updates VARCHAR NOT NULL,
  weekly_update_column VARCHAR,
  plan_for_next_week VARCHAR,
  issues_challenges VARCHAR,
  plan_for_green VARCHAR,
  current_sdlc_phase VARCHAR,
  sqa_remarks VARCHAR,
  submitted_by BIGINT,
  created_at TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS technical_review (
  review_id BIGINT PRIMARY KEY DEFAULT nextval('technical_review_seq'),
  project_id BIGINT NOT NULL,
  review_date DATE NOT NULL,
  review_type VARCHAR NOT NULL,
  review_cycle_number INTEGER NOT NULL DEFAULT 1,
  executive_summary VARCHAR NOT NULL,
  architecture_design_review VARCHAR,
  code_quality_standards VARCHAR,
  dev_ops_deployment_readiness VARCHAR,
  testing_qa VARCHAR,
  risk_identification VARCHAR,
  compliance_standards VARCHAR,
  action_items_recommendations VARCHAR,
  reviewer_sign_off VARCHAR,
  sqa_validation VARCHAR,
  conducted_by BIGINT,
  created_at TIMESTAMP NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS llm_configuration (
  config_id BIGINT PRIMARY KEY DEFAULT nextval('llm_configuration_seq'),
  provider VARCHAR NOT NULL,
  model_name VARCHAR NOT NULL,
  temperature DOUBLE NOT NULL DEFAULT 0.2,
  max_tokens INTEGER NOT NULL DEFAULT 2000,
  prompt_template VARCHAR,
  is_active BOOLEAN NOT NULL DEFAULT TRUE,
  last_updated_by BIGINT,
  created_at TIMESTAMP NOT NULL DEFAULT now(),
  updated_at TIMESTAMP NOT NULL DEFAULT now()
);
"""

INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_wsr_project ON weekly_status_report(project_id);
CREATE INDEX IF NOT EXISTS idx_wsr_reporting_date ON weekly_status_report(reporting_date);
CREATE INDEX IF NOT EXISTS idx_review_project ON technical_review(project_id);
"""

TABLES = ['app_user', 'weekly_status_report', 'technical_review', 'llm_configuration']


def create_schema(db: Optional[DatabaseConnection] = None):
    """Create all tables and sequences"""
    db = db or get_db()
    try:
        logger.info("Creating database schema...")
        db.execute_script(SCHEMA_SQL)
        logger.info("Database schema created successfully")
    except Exception as e:
        logger.error(f"Schema creation failed: {e}")
        raise


def create_indexes(db: Optional[DatabaseConnection] = None):
    """Create lookup indexes"""
    db = db or get_db()
    try:
        logger.info("Creating database indexes...")
        db.execute_script(INDEXES_SQL)
        logger.info("Database indexes created successfully")
    except Exception as e:
        logger.error(f"Index creation failed: {e}")
        raise


def seed_users(db: Optional[DatabaseConnection] = None):
    """Insert the known dashboard users (idempotent)"""
    db = db or get_db()
    try:
        logger.info("Seeding users...")
        for user in AVAILABLE_USERS:
            db.execute(
                """
                INSERT OR IGNORE INTO app_user
                    (user_id, username, email, display_name, role, assessment_level)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (user['id'], user['username'], user['email'], user['name'],
                 user['role'], user['assessment_level'])
            )
        logger.info(f"Users seeded successfully ({len(AVAILABLE_USERS)} records)")
    except Exception as e:
        logger.error(f"User seeding failed: {e}")
        raise


def drop_all_tables(db: Optional[DatabaseConnection] = None):
    """Drop all tables and sequences (WARNING: Deletes all data!)"""
    db = db or get_db()
    try:
        logger.warning("Dropping all tables...")
        for table in reversed(TABLES):
            db.execute(f"DROP TABLE IF EXISTS {table}")
        for sequence in ('weekly_status_report_seq', 'technical_review_seq', 'llm_configuration_seq'):
            db.execute(f"DROP SEQUENCE IF EXISTS {sequence}")
        logger.warning("All tables dropped")
    except Exception as e:
        logger.error(f"Table drop failed: {e}")
        raise


def initialize_schema(db: Optional[DatabaseConnection] = None, fresh_start: bool = False) -> bool:
    """Initialize the local store with schema, indexes and seed users

    Args:
        db: Connection to initialize; defaults to the global instance
        fresh_start: If True, drops all tables before recreating (WARNING: Deletes all data!)

    This is the main entry point for database setup.
    """
    db = db or get_db()
    try:
        if fresh_start:
            logger.warning("Fresh start requested - dropping all tables")
            drop_all_tables(db)

        logger.info("Initializing database...")
        create_schema(db)
        create_indexes(db)
        seed_users(db)

        missing = [table for table in TABLES if not db.table_exists(table)]
        if missing:
            raise RuntimeError(f"Missing tables after initialization: {', '.join(missing)}")

        logger.info("Database initialization complete!")
        return True

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


if __name__ == "__main__":
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    fresh_start = '--fresh' in sys.argv

    if fresh_start:
        print("WARNING: Fresh start will delete all existing data!")
        response = input("Continue? (yes/no): ")
        if response.lower() != 'yes':
            print("Aborted.")
            sys.exit(0)

    initialize_schema(fresh_start=fresh_start)
    print("[SUCCESS] Database initialization successful!")
