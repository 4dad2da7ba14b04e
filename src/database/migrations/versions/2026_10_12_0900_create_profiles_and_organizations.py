"""create_user_profiles_and_organizations

Revision ID: 4c1e9a7d2b10
Revises:
Create Date: 2026-10-12 09:00:00.000000

"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "4c1e9a7d2b10"
down_revision = None
branch_labels = None
depends_on = None

ROLES = ("job_seeker", "organization_owner", "independent_contractor")
SIZES = ("1-10", "11-50", "51-200", "201-1000", "1000+")
INDUSTRIES = (
    "Technology",
    "Healthcare",
    "Finance",
    "Education",
    "Manufacturing",
    "Retail",
    "Construction",
    "Consulting",
    "Media",
    "Government",
    "Non-profit",
    "Agriculture",
    "Transportation",
    "Energy",
    "Other",
)


def _in(column: str, values: tuple[str, ...]) -> str:
    quoted = ", ".join(f"'{value}'" for value in values)
    return f"{column} IS NULL OR {column} IN ({quoted})"


def upgrade() -> None:
    op.create_table(
        "user_profiles",
        sa.Column("user_id", sa.Uuid(), nullable=False, comment="Supabase Auth User ID"),
        sa.Column("role", sa.String(), nullable=False, server_default="job_seeker"),
        sa.Column(
            "role_confirmed", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("org_name_hint", sa.String(), nullable=True),
        sa.Column("org_size_hint", sa.String(), nullable=True),
        sa.Column("org_industry_hint", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("user_id", name="pk_user_profiles"),
        sa.CheckConstraint(_in("role", ROLES), name="ck_user_profiles_role"),
        sa.CheckConstraint(
            _in("org_size_hint", SIZES), name="ck_user_profiles_org_size"
        ),
        sa.CheckConstraint(
            _in("org_industry_hint", INDUSTRIES), name="ck_user_profiles_org_industry"
        ),
    )

    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("slug", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("industry", sa.String(), nullable=True),
        sa.Column("size_range", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_organizations"),
        sa.ForeignKeyConstraint(
            ["owner_id"],
            ["user_profiles.user_id"],
            name="fk_organizations_owner_id_user_profiles",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("owner_id", name="uq_organizations_owner_id"),
        sa.UniqueConstraint("slug", name="uq_organizations_slug"),
        sa.CheckConstraint(
            _in("size_range", SIZES), name="ck_organizations_size_range"
        ),
        sa.CheckConstraint(
            _in("industry", INDUSTRIES), name="ck_organizations_industry"
        ),
    )


def downgrade() -> None:
    op.drop_table("organizations")
    op.drop_table("user_profiles")
