"""create users, sleep_records and user_followings

Revision ID: 20250912_create_sleep_tracker_tables
Revises:
Create Date: 2025-09-12
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20250912_create_sleep_tracker_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(25), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])

    op.create_table(
        "sleep_records",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column(
            "user_id",
            sa.String(25),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("go_to_bed_at", sa.DateTime(), nullable=False),
        sa.Column("wake_up_at", sa.DateTime(), nullable=True),
        sa.Column("duration", sa.BigInteger(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "duration IS NULL OR duration > 0", name="ck_sleep_records_duration_positive"
        ),
    )
    op.create_index("ix_sleep_records_created_at", "sleep_records", ["created_at"])
    # History listing: WHERE user_id = ? ORDER BY created_at DESC
    op.create_index("ix_sleep_records_user_created", "sleep_records", ["user_id", "created_at"])
    # Friends' week listing: user filter + bedtime range + duration sort
    op.create_index(
        "ix_sleep_records_user_bed_duration",
        "sleep_records",
        ["user_id", "go_to_bed_at", "duration"],
    )
    # One active session per user
    op.create_index(
        "uq_sleep_records_user_active",
        "sleep_records",
        ["user_id"],
        unique=True,
        postgresql_where=sa.text("wake_up_at IS NULL"),
        sqlite_where=sa.text("wake_up_at IS NULL"),
    )

    op.create_table(
        "user_followings",
        sa.Column("id", sa.String(25), primary_key=True),
        sa.Column(
            "follower_id",
            sa.String(25),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "followed_id",
            sa.String(25),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.UniqueConstraint("follower_id", "followed_id", name="uq_user_followings_pair"),
    )
    op.create_index("ix_user_followings_id", "user_followings", ["id"])
    op.create_index("ix_user_followings_follower_id", "user_followings", ["follower_id"])
    op.create_index("ix_user_followings_followed_id", "user_followings", ["followed_id"])
    op.create_index(
        "ix_user_followings_follower_created",
        "user_followings",
        ["follower_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_user_followings_follower_created", table_name="user_followings")
    op.drop_index("ix_user_followings_followed_id", table_name="user_followings")
    op.drop_index("ix_user_followings_follower_id", table_name="user_followings")
    op.drop_index("ix_user_followings_id", table_name="user_followings")
    op.drop_table("user_followings")

    op.drop_index("uq_sleep_records_user_active", table_name="sleep_records")
    op.drop_index("ix_sleep_records_user_bed_duration", table_name="sleep_records")
    op.drop_index("ix_sleep_records_user_created", table_name="sleep_records")
    op.drop_index("ix_sleep_records_created_at", table_name="sleep_records")
    op.drop_table("sleep_records")

    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
