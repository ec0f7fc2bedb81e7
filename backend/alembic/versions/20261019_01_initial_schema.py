"""initial schema: users, tokens, hoaxes, file attachments

Revision ID: 20261019_01
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "20261019_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(length=32), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password", sa.String(length=255), nullable=True),
        sa.Column("inactive", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("activation_token", sa.String(length=64), nullable=True),
        sa.Column("password_reset_token", sa.String(length=64), nullable=True),
        sa.Column("image", sa.Text(), nullable=True),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_activation_token", "users", ["activation_token"])
    op.create_index("ix_users_password_reset_token", "users", ["password_reset_token"])

    op.create_table(
        "tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=True),
        sa.Column("last_used_at", sa.BigInteger(), nullable=False),
    )
    op.create_index("ix_tokens_id", "tokens", ["id"])
    op.create_index("ix_tokens_token", "tokens", ["token"])
    op.create_index("ix_tokens_user_id", "tokens", ["user_id"])
    op.create_index("ix_tokens_last_used_at", "tokens", ["last_used_at"])

    op.create_table(
        "hoaxes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    )
    op.create_index("ix_hoaxes_id", "hoaxes", ["id"])
    op.create_index("ix_hoaxes_timestamp", "hoaxes", ["timestamp"])
    op.create_index("ix_hoaxes_user_id", "hoaxes", ["user_id"])

    op.create_table(
        "file_attachments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("filename", sa.String(length=64), nullable=False),
        sa.Column("upload_date", sa.BigInteger(), nullable=False),
        sa.Column("file_type", sa.String(length=255), nullable=False),
        sa.Column(
            "hoax_id",
            sa.Integer(),
            sa.ForeignKey("hoaxes.id", ondelete="CASCADE"),
            nullable=True,
            unique=True,
        ),
    )
    op.create_index("ix_file_attachments_id", "file_attachments", ["id"])
    op.create_index("ix_file_attachments_upload_date", "file_attachments", ["upload_date"])


def downgrade() -> None:
    op.drop_index("ix_file_attachments_upload_date", table_name="file_attachments")
    op.drop_index("ix_file_attachments_id", table_name="file_attachments")
    op.drop_table("file_attachments")

    op.drop_index("ix_hoaxes_user_id", table_name="hoaxes")
    op.drop_index("ix_hoaxes_timestamp", table_name="hoaxes")
    op.drop_index("ix_hoaxes_id", table_name="hoaxes")
    op.drop_table("hoaxes")

    op.drop_index("ix_tokens_last_used_at", table_name="tokens")
    op.drop_index("ix_tokens_user_id", table_name="tokens")
    op.drop_index("ix_tokens_token", table_name="tokens")
    op.drop_index("ix_tokens_id", table_name="tokens")
    op.drop_table("tokens")

    op.drop_index("ix_users_password_reset_token", table_name="users")
    op.drop_index("ix_users_activation_token", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_id", table_name="users")
    op.drop_table("users")
