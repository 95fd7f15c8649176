# mypy: ignore-errors
"""
Migration Alembic créant les tables elements, content et relations.

La table content ne reçoit ici que ses colonnes de base; une colonne par champ est ajoutée
ensuite par `ContentTableManager.sync_columns`.
"""

from __future__ import annotations

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Crée les tables elements, content (colonnes de base) et relations."""
    op.create_table(
        "elements",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("type", sa.String(length=150), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("date_created", sa.DateTime(), nullable=False),
        sa.Column("date_updated", sa.DateTime(), nullable=False),
    )
    op.create_table(
        "content",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "element_id",
            sa.Integer(),
            sa.ForeignKey("elements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("locale", sa.String(length=12), nullable=False),
        sa.Column("revision", sa.Integer(), nullable=False, server_default="0"),
        sa.UniqueConstraint("element_id", "locale", name="uq_content_element_locale"),
    )
    op.create_table(
        "relations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("field_id", sa.Integer(), nullable=False),
        sa.Column(
            "parent_id",
            sa.Integer(),
            sa.ForeignKey("elements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "child_id",
            sa.Integer(),
            sa.ForeignKey("elements.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.UniqueConstraint(
            "field_id", "parent_id", "child_id", name="uq_relations_field_parent_child"
        ),
    )


def downgrade() -> None:
    """Supprime les tables créées par upgrade()."""
    op.drop_table("relations")
    op.drop_table("content")
    op.drop_table("elements")
