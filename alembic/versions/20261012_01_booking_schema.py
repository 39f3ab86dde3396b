"""Deployment slots, releases and e-mail templates."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261012_01"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "deployment_slots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("ordinal", sa.Integer(), nullable=False),
        sa.Column("time", sa.String(length=32), nullable=False),
        sa.Column("time_detail", sa.String(length=64)),
        sa.Column(
            "booked", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column("release_id", sa.Integer()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_deployment_slots"),
        sa.UniqueConstraint("date", "ordinal", name="uq_deployment_slots_date_ordinal"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_deployment_slots_date", "deployment_slots", ["date"])

    op.create_table(
        "releases",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("version", sa.String(length=64)),
        sa.Column("team", sa.String(length=64), nullable=False),
        sa.Column("release_type", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column(
            "status", sa.String(length=16), nullable=False, server_default="pending"
        ),
        sa.Column("comments", sa.Text()),
        sa.Column("slot_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_releases"),
        sa.ForeignKeyConstraint(
            ["slot_id"],
            ["deployment_slots.id"],
            name="fk_releases_slot_id_deployment_slots",
        ),
        sa.UniqueConstraint("slot_id", name="uq_releases_slot_id"),
        sqlite_autoincrement=True,
    )

    op.create_table(
        "email_templates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=128), nullable=False),
        sa.Column("subject", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("variables", sa.JSON(), nullable=False),
        sa.Column(
            "is_default", sa.Boolean(), nullable=False, server_default=sa.text("FALSE")
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_email_templates"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_email_templates_category", "email_templates", ["category"])


def downgrade() -> None:
    op.drop_index("ix_email_templates_category", table_name="email_templates")
    op.drop_table("email_templates")
    op.drop_table("releases")
    op.drop_index("ix_deployment_slots_date", table_name="deployment_slots")
    op.drop_table("deployment_slots")
