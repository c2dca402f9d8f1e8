"""create contractual_documents and contractual_extra_documents tables

Revision ID: 004
Revises: 003
Create Date: 2025-03-03 10:30:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "contractual_documents",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("contract_member_id", sa.String(length=36), nullable=False),
        sa.Column("required_document_id", sa.String(length=36), nullable=False),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("month", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contract_member_id"], ["contract_members.id"]),
        sa.ForeignKeyConstraint(["required_document_id"], ["required_documents.id"]),
    )
    op.create_index(
        "ix_contractual_documents_contract_member_id",
        "contractual_documents",
        ["contract_member_id"],
        unique=False,
    )
    # At most one live row per member x requirement x month (precontractual rows have no month)
    op.create_index(
        "uq_contractual_documents_member_requirement_month",
        "contractual_documents",
        ["contract_member_id", "required_document_id", sa.text("coalesce(month, '')")],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )

    op.create_table(
        "contractual_extra_documents",
        sa.Column("id", sa.String(length=36), nullable=False),
        sa.Column("contract_member_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("month", sa.String(length=32), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["contract_member_id"], ["contract_members.id"]),
    )
    op.create_index(
        "ix_contractual_extra_documents_contract_member_id",
        "contractual_extra_documents",
        ["contract_member_id"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index(
        "ix_contractual_extra_documents_contract_member_id",
        table_name="contractual_extra_documents",
    )
    op.drop_table("contractual_extra_documents")
    op.drop_index(
        "uq_contractual_documents_member_requirement_month",
        table_name="contractual_documents",
    )
    op.drop_index(
        "ix_contractual_documents_contract_member_id", table_name="contractual_documents"
    )
    op.drop_table("contractual_documents")
