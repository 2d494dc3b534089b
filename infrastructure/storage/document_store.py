# infrastructure/storage/document_store.py
import json
from typing import Dict, Any, Optional
import asyncpg
from shared.logging import logger

# Exactly one workflow document per deployment
WORKFLOW_DOCUMENT_KEY = "tasks"

class DocumentStore:
    """Single-document key-value store consumed by the workflow engine"""

    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    async def save(self, key: str, document: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        pass

class InMemoryDocumentStore(DocumentStore):
    """Process-local store; documents are kept serialized so every load is a fresh copy"""

    def __init__(self, initial: Optional[Dict[str, Dict[str, Any]]] = None):
        self._documents: Dict[str, str] = {}
        for key, document in (initial or {}).items():
            self._documents[key] = json.dumps(document)

    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._documents.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    async def save(self, key: str, document: Dict[str, Any]) -> None:
        self._documents[key] = json.dumps(document)

class PostgresDocumentStore(DocumentStore):
    def __init__(self, database_url: str):
        self.database_url = database_url
        self.connection_pool: Optional[asyncpg.Pool] = None

    async def initialize(self):
        """Initialize database connection pool and create the documents table"""
        self.connection_pool = await asyncpg.create_pool(
            self.database_url,
            min_size=1,
            max_size=10,
            command_timeout=60
        )
        await self._create_tables()

    async def _create_tables(self):
        async with self.connection_pool.acquire() as conn:
            await conn.execute("""
                CREATE TABLE IF NOT EXISTS workflow_documents (
                    doc_key VARCHAR(100) PRIMARY KEY,
                    document JSONB NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

    async def load(self, key: str) -> Optional[Dict[str, Any]]:
        async with self.connection_pool.acquire() as conn:
            row = await conn.fetchrow("""
                SELECT document FROM workflow_documents WHERE doc_key = $1
            """, key)

        if not row:
            return None
        document = row["document"]
        # asyncpg hands JSONB back as text unless a codec is registered
        if isinstance(document, str):
            document = json.loads(document)
        return document

    async def save(self, key: str, document: Dict[str, Any]) -> None:
        # Plain upsert: no version check, the last writer wins
        async with self.connection_pool.acquire() as conn:
            await conn.execute("""
                INSERT INTO workflow_documents (doc_key, document, updated_at)
                VALUES ($1, $2, CURRENT_TIMESTAMP)
                ON CONFLICT (doc_key) DO UPDATE SET
                document = $2, updated_at = CURRENT_TIMESTAMP
            """, key, json.dumps(document))

    async def ping(self) -> bool:
        async with self.connection_pool.acquire() as conn:
            await conn.fetchval("SELECT 1")
        return True

    async def close(self):
        """Close database connection pool"""
        if self.connection_pool:
            await self.connection_pool.close()
            logger.info("Database connection pool closed")
