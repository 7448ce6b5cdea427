"""
Database connection management and migrations.
"""
import asyncpg
import logging
from typing import Optional
from stars.config import DATABASE_URL

logger = logging.getLogger(__name__)

# Global connection pool
_db_pool: Optional[asyncpg.Pool] = None


async def get_db_pool() -> asyncpg.Pool:
    """Get or create the database connection pool.

    Pool configuration optimized for Supabase Session Mode Pooler:
    - setup callback validates connections on acquire (like SQLAlchemy pool_pre_ping)
    - max_inactive_connection_lifetime matches Supabase pooler timeout (~5 min)
    - min_size=2 pre-warms connections to avoid cold start latency
    """
    global _db_pool
    if _db_pool is None:
        if not DATABASE_URL:
            raise RuntimeError("DATABASE_URL environment variable is required")

        # Convert SQLAlchemy URL to asyncpg format
        raw_url = DATABASE_URL.replace("postgresql+asyncpg://", "postgresql://")

        async def setup_connection(conn):
            """Validate connection on acquire - equivalent to pool_pre_ping."""
            await conn.execute("SELECT 1")

        _db_pool = await asyncpg.create_pool(
            raw_url,
            min_size=2,
            max_size=10,
            command_timeout=60,
            max_inactive_connection_lifetime=300.0,
            setup=setup_connection,
        )
        logger.info("Database connection pool created (min=2, max=10, idle_lifetime=300s)")
    return _db_pool


async def close_db_pool():
    """Close the database connection pool."""
    global _db_pool
    if _db_pool is not None:
        await _db_pool.close()
        _db_pool = None
        logger.info("Database connection pool closed")


async def run_schema_migrations(pool: asyncpg.Pool):
    """Create the pipeline tables and indexes if they don't exist."""
    try:
        await pool.execute("""
            CREATE TABLE IF NOT EXISTS organizations (
                id            UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                name          VARCHAR(200) NOT NULL CHECK (length(trim(name)) > 0),
                logo_url      TEXT,
                primary_color VARCHAR(7),
                created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id               UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                email            VARCHAR(320) NOT NULL,
                name             VARCHAR(200) NOT NULL,
                role             VARCHAR(10) NOT NULL CHECK (role IN ('admin', 'client')),
                org_id           UUID REFERENCES organizations(id) ON DELETE RESTRICT,
                supabase_user_id VARCHAR(255) UNIQUE,
                is_active        BOOLEAN NOT NULL DEFAULT true,
                created_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                last_login_at    TIMESTAMPTZ,
                CONSTRAINT chk_user_role_org CHECK (
                    (role = 'admin' AND org_id IS NULL) OR (role = 'client' AND org_id IS NOT NULL)
                )
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS positions (
                id          UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                title       VARCHAR(200) NOT NULL,
                description TEXT,
                status      VARCHAR(10) NOT NULL DEFAULT 'open' CHECK (status IN ('open', 'closed')),
                org_id      UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
                created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS candidates (
                id                 UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                full_name          VARCHAR(200) NOT NULL CHECK (length(trim(full_name)) > 0),
                email              VARCHAR(320),
                phone              VARCHAR(50),
                "current_role"     VARCHAR(200),
                current_company    VARCHAR(200),
                summary            TEXT,
                external_ref       VARCHAR(255) UNIQUE,
                manatal_id         BIGINT UNIQUE,
                manatal_url        TEXT,
                manatal_imported_at TIMESTAMPTZ,
                created_at         TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at         TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS candidate_files (
                id           UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                candidate_id UUID NOT NULL REFERENCES candidates(id) ON DELETE CASCADE,
                file_url     TEXT NOT NULL,
                file_name    VARCHAR(255) NOT NULL,
                file_type    VARCHAR(100) NOT NULL,
                uploaded_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS candidate_positions (
                id                  UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                candidate_id        UUID NOT NULL REFERENCES candidates(id) ON DELETE CASCADE,
                position_id         UUID NOT NULL REFERENCES positions(id) ON DELETE CASCADE,
                stage               VARCHAR(20) NOT NULL DEFAULT 'submitted'
                                    CHECK (stage IN ('submitted', 'to_interview', 'approved', 'rejected')),
                created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                last_interaction_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                CONSTRAINT uq_candidate_position UNIQUE (position_id, candidate_id)
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS comments (
                id                    UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                body                  TEXT NOT NULL CHECK (length(trim(body)) > 0),
                user_id               UUID NOT NULL REFERENCES users(id),
                candidate_position_id UUID NOT NULL REFERENCES candidate_positions(id) ON DELETE CASCADE,
                created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS activity_log (
                id                    UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                action                VARCHAR(50) NOT NULL,
                from_stage            VARCHAR(20),
                to_stage              VARCHAR(20),
                user_id               UUID NOT NULL REFERENCES users(id),
                user_name             VARCHAR(200) NOT NULL,
                candidate_position_id UUID NOT NULL REFERENCES candidate_positions(id) ON DELETE CASCADE,
                created_at            TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS notifications (
                id                            UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                type                          VARCHAR(30) NOT NULL CHECK (
                    type IN ('stage_change', 'new_comment', 'client_login', 'candidate_assigned')
                ),
                message                       TEXT NOT NULL,
                is_read                       BOOLEAN NOT NULL DEFAULT false,
                user_id                       UUID NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                related_candidate_position_id UUID REFERENCES candidate_positions(id) ON DELETE SET NULL,
                created_at                    TIMESTAMPTZ NOT NULL DEFAULT NOW()
            );
        """)

        await pool.execute("""
            CREATE TABLE IF NOT EXISTS email_log (
                id                            UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                "to"                          VARCHAR(320) NOT NULL,
                subject                       TEXT NOT NULL,
                template_name                 VARCHAR(50) NOT NULL,
                related_event_type            VARCHAR(30) NOT NULL,
                related_candidate_position_id UUID REFERENCES candidate_positions(id) ON DELETE SET NULL,
                sent_at                       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                status                        VARCHAR(10) NOT NULL CHECK (status IN ('sent', 'failed')),
                error                         TEXT,
                provider_message_id           VARCHAR(255)
            );
        """)

        await pool.execute("""
            CREATE INDEX IF NOT EXISTS idx_users_org ON users(org_id);
            CREATE INDEX IF NOT EXISTS idx_users_role ON users(role);
            CREATE INDEX IF NOT EXISTS idx_positions_org ON positions(org_id);
            CREATE INDEX IF NOT EXISTS idx_candidate_files_candidate ON candidate_files(candidate_id);
            CREATE INDEX IF NOT EXISTS idx_candidate_positions_position ON candidate_positions(position_id);
            CREATE INDEX IF NOT EXISTS idx_candidate_positions_candidate ON candidate_positions(candidate_id);
            CREATE INDEX IF NOT EXISTS idx_candidate_positions_stage ON candidate_positions(stage);
            CREATE INDEX IF NOT EXISTS idx_comments_candidate_position ON comments(candidate_position_id);
            CREATE INDEX IF NOT EXISTS idx_activity_log_candidate_position ON activity_log(candidate_position_id);
            CREATE INDEX IF NOT EXISTS idx_activity_log_created_at ON activity_log(created_at);
            CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id);
            CREATE INDEX IF NOT EXISTS idx_notifications_user_unread ON notifications(user_id, is_read);
            CREATE INDEX IF NOT EXISTS idx_email_log_event
                ON email_log(related_event_type, related_candidate_position_id);
        """)

        logger.info("Schema migrations completed")
    except Exception as e:
        logger.warning(f"Schema migration warning (may be ok if already done): {e}")
