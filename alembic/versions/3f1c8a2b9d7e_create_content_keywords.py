"""create content keywords

Revision ID: 3f1c8a2b9d7e
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c8a2b9d7e"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "content_keywords",
        sa.Column("id", sa.String(length=32), nullable=False),
        sa.Column("keyword", sa.String(length=200), nullable=False),
        sa.Column("keyword_normalized", sa.String(length=200), nullable=False),
        sa.Column("keyword_native", sa.Text(), nullable=True),
        sa.Column("keyword_ko", sa.Text(), nullable=True),
        sa.Column("locale", sa.String(length=10), nullable=False),
        sa.Column("target_locale", sa.String(length=10), nullable=True),
        sa.Column("category", sa.String(length=50), nullable=False, server_default="general"),
        sa.Column("search_volume", sa.Integer(), nullable=True),
        sa.Column("competition", sa.Integer(), nullable=True),
        sa.Column("competition_level", sa.String(length=10), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="pending"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("locale", "keyword_normalized", name="uq_content_keywords_locale_keyword"),
    )
    op.create_index("ix_content_keywords_locale", "content_keywords", ["locale"])
    op.create_index("idx_content_keywords_target_locale", "content_keywords", ["target_locale"])


def downgrade() -> None:
    op.drop_index("idx_content_keywords_target_locale", table_name="content_keywords")
    op.drop_index("ix_content_keywords_locale", table_name="content_keywords")
    op.drop_table("content_keywords")
