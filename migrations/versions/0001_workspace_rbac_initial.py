"""workspace rbac initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
    return [
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=True),
        sa.Column("updated_by", sa.Uuid(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_superuser", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "workspaces",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_workspaces_owner_id", "workspaces", ["owner_id"])

    op.create_table(
        "permissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("resource", sa.String(50), nullable=False),
        sa.Column("action", sa.String(50), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_permissions_name", "permissions", ["name"], unique=True)
    op.create_index("ix_permissions_resource", "permissions", ["resource"])
    op.create_index("ix_permissions_action", "permissions", ["action"])

    op.create_table(
        "user_workspaces",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), sa.ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "access_level",
            sa.Enum("owner", "admin", "editor", "viewer", "approver",
                    name="workspace_access_level", native_enum=False),
            nullable=False,
        ),
        *_audit_columns(),
    )
    op.create_index("ix_user_workspaces_workspace_id", "user_workspaces", ["workspace_id"])
    op.create_index(
        "uq_user_workspaces_active_member",
        "user_workspaces",
        ["user_id", "workspace_id"],
        unique=True,
        postgresql_where=sa.text("is_active = true"),
        sqlite_where=sa.text("is_active = 1"),
    )

    op.create_table(
        "user_workspace_permissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("workspace_id", sa.Uuid(), sa.ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission_ids", sa.JSON(), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        *_audit_columns(),
    )
    op.create_index("ix_user_workspace_permissions_user_id", "user_workspace_permissions", ["user_id"])
    op.create_index("ix_user_workspace_permissions_workspace_id", "user_workspace_permissions", ["workspace_id"])
    op.create_index(
        "uq_user_workspace_permissions_active",
        "user_workspace_permissions",
        ["user_id", "workspace_id"],
        unique=True,
        postgresql_where=sa.text("is_active = true"),
        sqlite_where=sa.text("is_active = 1"),
    )

    op.create_table(
        "impersonation_sessions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("impersonator_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("impersonated_user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "status",
            sa.Enum("active", "ended", "expired", name="impersonation_status", native_enum=False),
            nullable=False,
        ),
        sa.Column("started_at", sa.DateTime(), nullable=False),
        sa.Column("ended_at", sa.DateTime(), nullable=True),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        *_audit_columns(),
    )
    op.create_index("ix_impersonation_sessions_impersonator_id", "impersonation_sessions", ["impersonator_id"])
    op.create_index(
        "ix_impersonation_sessions_impersonated_user_id", "impersonation_sessions", ["impersonated_user_id"]
    )
    op.create_index("ix_impersonation_sessions_status", "impersonation_sessions", ["status"])
    op.create_index(
        "uq_impersonation_sessions_one_active",
        "impersonation_sessions",
        ["impersonator_id"],
        unique=True,
        postgresql_where=sa.text("status = 'active' AND is_active = true"),
        sqlite_where=sa.text("status = 'active' AND is_active = 1"),
    )


def downgrade() -> None:
    op.drop_table("impersonation_sessions")
    op.drop_table("user_workspace_permissions")
    op.drop_table("user_workspaces")
    op.drop_table("permissions")
    op.drop_table("workspaces")
    op.drop_table("users")
