"""Initial schema: agencies, users, creators, deals.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-17

Enum columns store member names (SQLAlchemy's default for Python enums).
Deals reference creators without ON DELETE CASCADE; creator deletion removes
deals explicitly in the same transaction.
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLE = sa.Enum("user", "admin", name="userrole")
DEAL_STATUS = sa.Enum(
    "pending", "negotiating", "active", "completed", "cancelled", name="dealstatus"
)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "agencies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_agencies"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.String(256), nullable=True),
        sa.Column("password_hash", sa.String(128), nullable=True),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("agency_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["agency_id"], ["agencies.id"], name="fk_users_agency_id_agencies"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("ix_users_agency_id", "users", ["agency_id"])

    op.create_table(
        "creators",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("agency_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("niche", sa.String(200), nullable=False),
        sa.Column("social_handles", sa.JSON(), nullable=False),
        sa.Column("base_rate", sa.Float(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["agency_id"], ["agencies.id"], name="fk_creators_agency_id_agencies"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_creators"),
    )
    op.create_index("ix_creators_agency_id", "creators", ["agency_id"])
    op.create_index("ix_creators_agency_created", "creators", ["agency_id", "created_at"])

    op.create_table(
        "deals",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("creator_id", sa.Uuid(), nullable=False),
        sa.Column("brand", sa.String(200), nullable=False),
        sa.Column("contact_name", sa.String(200), nullable=True),
        sa.Column("contact_email", sa.String(320), nullable=True),
        sa.Column("amount", sa.Float(), nullable=True),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("status", DEAL_STATUS, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("requirements", sa.Text(), nullable=True),
        sa.Column("deliverables", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("next_action_at", sa.DateTime(), nullable=True),
        sa.Column("contract_url", sa.String(2048), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["creator_id"], ["creators.id"], name="fk_deals_creator_id_creators"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_deals"),
    )
    op.create_index("ix_deals_creator_id", "deals", ["creator_id"])
    op.create_index("ix_deals_status", "deals", ["status"])
    op.create_index("ix_deals_creator_created", "deals", ["creator_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_deals_creator_created", table_name="deals")
    op.drop_index("ix_deals_status", table_name="deals")
    op.drop_index("ix_deals_creator_id", table_name="deals")
    op.drop_table("deals")
    op.drop_index("ix_creators_agency_created", table_name="creators")
    op.drop_index("ix_creators_agency_id", table_name="creators")
    op.drop_table("creators")
    op.drop_index("ix_users_agency_id", table_name="users")
    op.drop_table("users")
    op.drop_table("agencies")
    DEAL_STATUS.drop(op.get_bind(), checkfirst=True)
    USER_ROLE.drop(op.get_bind(), checkfirst=True)
