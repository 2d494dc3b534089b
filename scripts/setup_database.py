# scripts/setup_database.py
"""
Database setup script for the Request Workflow Service.
Creates the workflow document table used by PostgresDocumentStore.
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import asyncpg
from infrastructure.storage.document_store import WORKFLOW_DOCUMENT_KEY
from shared.logging import logger, setup_logging

async def create_database_if_not_exists(admin_url: str, database_name: str):
    """Create database if it doesn't exist"""
    admin_conn = await asyncpg.connect(admin_url)

    try:
        db_exists = await admin_conn.fetchval(
            "SELECT 1 FROM pg_database WHERE datname = $1", database_name
        )

        if not db_exists:
            await admin_conn.execute(f'CREATE DATABASE "{database_name}"')
            logger.info(f"Created database: {database_name}")
        else:
            logger.info(f"Database already exists: {database_name}")
    finally:
        await admin_conn.close()

async def setup_tables(database_url: str):
    """Create the workflow document table and its timestamp trigger"""

    conn = await asyncpg.connect(database_url)

    try:
        logger.info("Creating database tables...")

        await conn.execute("""
            CREATE TABLE IF NOT EXISTS workflow_documents (
                doc_key VARCHAR(100) PRIMARY KEY,
                document JSONB NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        logger.info("✓ Created workflow_documents table")

        await conn.execute("""
            CREATE OR REPLACE FUNCTION update_updated_at_column()
            RETURNS TRIGGER AS $$
            BEGIN
                NEW.updated_at = CURRENT_TIMESTAMP;
                RETURN NEW;
            END;
            $$ language 'plpgsql'
        """)

        await conn.execute("""
            DROP TRIGGER IF EXISTS update_workflow_documents_updated_at ON workflow_documents;
            CREATE TRIGGER update_workflow_documents_updated_at
                BEFORE UPDATE ON workflow_documents
                FOR EACH ROW
                EXECUTE FUNCTION update_updated_at_column()
        """)
        logger.info("✓ Created automatic timestamp trigger")

    finally:
        await conn.close()

async def verify_setup(database_url: str):
    """Verify the table exists and the workflow document key is readable"""

    conn = await asyncpg.connect(database_url)

    try:
        logger.info("Verifying database setup...")

        table = await conn.fetchval("""
            SELECT table_name FROM information_schema.tables
            WHERE table_schema = 'public' AND table_name = 'workflow_documents'
        """)
        if not table:
            raise RuntimeError("Missing table: workflow_documents")

        existing = await conn.fetchval("""
            SELECT jsonb_array_length(document->'requests') FROM workflow_documents
            WHERE doc_key = $1
        """, WORKFLOW_DOCUMENT_KEY)

        if existing is None:
            logger.info("No workflow document stored yet; it is created on the first request")
        else:
            logger.info(f"✓ Workflow document present with {existing} requests")

        logger.info("Database verification completed successfully!")
    finally:
        await conn.close()

async def main():
    """Main setup function"""

    setup_logging(level="INFO", json_logs=False)

    logger.info("Starting Request Workflow Service database setup")

    database_url = os.getenv("DATABASE_URL")

    if not database_url:
        # Default local development setup
        host = os.getenv("DB_HOST", "localhost")
        port = os.getenv("DB_PORT", "5432")
        user = os.getenv("DB_USER", "postgres")
        password = os.getenv("DB_PASSWORD", "postgres")
        database = os.getenv("DB_NAME", "request_workflow")

        database_url = f"postgresql://{user}:{password}@{host}:{port}/{database}"
        admin_url = f"postgresql://{user}:{password}@{host}:{port}/postgres"

        logger.info(f"Using database: {host}:{port}/{database}")

        try:
            await create_database_if_not_exists(admin_url, database)
        except Exception as e:
            logger.warning(f"Could not create database (may already exist): {e}")

    try:
        await setup_tables(database_url)
        await verify_setup(database_url)
        logger.info("Database setup completed successfully!")
    except Exception as e:
        logger.error(f"Database setup failed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    asyncio.run(main())
