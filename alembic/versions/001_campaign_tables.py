"""Campaign tables: participants, puzzle catalog, and the idempotency ledgers.

Creates participants, puzzles, puzzle_sends, answer_submissions,
hint_usage and transactions. The (participant, day) unique keys on
puzzle_sends and answer_submissions gate every send and every answer.

Revision ID: 001_campaign_tables
Revises:
Create Date: 2026-10-18
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_campaign_tables"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Participants ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS participants (
            address VARCHAR(64) PRIMARY KEY,
            paid BOOLEAN NOT NULL DEFAULT FALSE,
            current_day INTEGER NOT NULL DEFAULT 1,
            pending_reward_choice BOOLEAN NOT NULL DEFAULT FALSE,
            joined_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_participants_paid
        ON participants(paid) WHERE paid = TRUE
    """)

    # --- Puzzle catalog ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS puzzles (
            day INTEGER PRIMARY KEY CHECK (day >= 1),
            question TEXT NOT NULL,
            answer VARCHAR(256) NOT NULL,
            hint1 TEXT,
            hint2 TEXT,
            hint3 TEXT,
            category VARCHAR(64),
            difficulty INTEGER NOT NULL DEFAULT 1
        )
    """)

    # --- Puzzle sends ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS puzzle_sends (
            id SERIAL PRIMARY KEY,
            participant VARCHAR(64) NOT NULL REFERENCES participants(address) ON DELETE CASCADE,
            day INTEGER NOT NULL,
            sent_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_puzzle_sends_participant_day UNIQUE (participant, day)
        )
    """)

    # --- Answer submissions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS answer_submissions (
            id SERIAL PRIMARY KEY,
            participant VARCHAR(64) NOT NULL REFERENCES participants(address) ON DELETE CASCADE,
            day INTEGER NOT NULL,
            answer_text TEXT NOT NULL,
            submitted_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            puzzle_sent_at TIMESTAMPTZ,
            response_time_ms BIGINT,
            is_correct BOOLEAN NOT NULL DEFAULT FALSE,
            hints_used INTEGER NOT NULL DEFAULT 0,
            CONSTRAINT uq_answer_submissions_participant_day UNIQUE (participant, day)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_answers_correct
        ON answer_submissions(is_correct)
    """)

    # --- Hint usage ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS hint_usage (
            participant VARCHAR(64) NOT NULL,
            day INTEGER NOT NULL,
            hints_used INTEGER NOT NULL DEFAULT 0 CHECK (hints_used BETWEEN 0 AND 3),
            PRIMARY KEY (participant, day)
        )
    """)

    # --- Reward transactions ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS transactions (
            id SERIAL PRIMARY KEY,
            participant VARCHAR(64) NOT NULL REFERENCES participants(address) ON DELETE CASCADE,
            day INTEGER NOT NULL,
            reward_path VARCHAR(16) NOT NULL,
            asset VARCHAR(64) NOT NULL,
            amount NUMERIC(20,6) NOT NULL,
            external_ref VARCHAR(128),
            status VARCHAR(16) NOT NULL DEFAULT 'pending',
            error TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            completed_at TIMESTAMPTZ
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_transactions_participant
        ON transactions(participant)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS transactions CASCADE")
    op.execute("DROP TABLE IF EXISTS hint_usage CASCADE")
    op.execute("DROP TABLE IF EXISTS answer_submissions CASCADE")
    op.execute("DROP TABLE IF EXISTS puzzle_sends CASCADE")
    op.execute("DROP TABLE IF EXISTS puzzles CASCADE")
    op.execute("DROP TABLE IF EXISTS participants CASCADE")
