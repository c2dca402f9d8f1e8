"""create contract_members and contract_members_extension tables

Revision ID: 003
Revises: 002
Create Date: 2025-03-03 10:20:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "contract_members",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("contract_id", sa.String(length=36), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="pending"),
        sa.Column("value", sa.String(length=64), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("signed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contratante_signed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("ending", sa.JSON(), nullable=True),
        sa.Column("status_juridico", sa.JSON(), nullable=True),
        sa.Column("status_seguridad_social", sa.JSON(), nullable=True),
        sa.Column("contract", sa.JSON(), nullable=True),
        sa.Column("invited_at", sa.DateTime(), nullable=True),
        sa.Column("accepted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["contract_id"], ["contracts.id"]),
        sa.CheckConstraint(
            "status IN ('pending', 'accepted')",
            name="ck_contract_members_status",
        ),
    )
    op.create_index("ix_contract_members_user_id", "contract_members", ["user_id"], unique=False)
    op.create_index(
        "ix_contract_members_contract_id", "contract_members", ["contract_id"], unique=False
    )

    op.create_table(
        "contract_members_extension",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("contract_member_id", sa.String(length=36), nullable=False),
        sa.Column("extension_start_date", sa.Date(), nullable=False),
        sa.Column("extension_end_date", sa.Date(), nullable=False),
        sa.Column("extension_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contract_member_id"], ["contract_members.id"]),
    )
    op.create_index(
        "ix_contract_members_extension_contract_member_id",
        "contract_members_extension",
        ["contract_member_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_contract_members_extension_contract_member_id",
        table_name="contract_members_extension",
    )
    op.drop_table("contract_members_extension")
    op.drop_index("ix_contract_members_contract_id", table_name="contract_members")
    op.drop_index("ix_contract_members_user_id", table_name="contract_members")
    op.drop_table("contract_members")
