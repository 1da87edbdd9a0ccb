"""create_hr_evaluation_tables

Creates departments, users and evaluations.

departments.manager_id and users.department_id reference each other, so
the manager foreign key is added once both tables exist.

Revision ID: 3f9c2a71d4e0
Revises:
Create Date: 2026-10-18 09:12:40.118230

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f9c2a71d4e0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ('ADMIN', 'MANAGER', 'SUPERVISOR', 'HR', 'STAFF', 'DEPARTMENT_HEAD')
SCORE_COLUMNS = (
    'work_quality', 'work_quantity', 'knowledge', 'initiative', 'teamwork',
    'communication', 'punctuality', 'management', 'reliability', 'other_factors',
)


def upgrade() -> None:
    """Create the HR evaluation schema."""

    # 1. Departments (manager FK added in step 4)
    op.create_table(
        'departments',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, nullable=False, index=True),
        sa.Column('name', sa.String(), nullable=False, index=True),
        sa.Column('manager_id', sa.Uuid(as_uuid=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
    )

    # 2. Users
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, nullable=False, index=True),
        sa.Column('employee_id', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('name_en', sa.String(), nullable=False),
        sa.Column('name_kh', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('role', sa.Enum(*USER_ROLES, name='userrole'), nullable=False, index=True),
        sa.Column('position', sa.String(), nullable=True),
        sa.Column('gender', sa.Enum('MALE', 'FEMALE', name='gender'), nullable=False),
        sa.Column('join_date', sa.Date(), nullable=False),
        sa.Column('department_id', sa.Uuid(as_uuid=True), nullable=True, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['department_id'], ['departments.id']),
    )

    # 3. Evaluations
    op.create_table(
        'evaluations',
        sa.Column('id', sa.Uuid(as_uuid=True), primary_key=True, nullable=False, index=True),
        sa.Column('month', sa.Integer(), nullable=False, index=True),
        sa.Column('year', sa.Integer(), nullable=False, index=True),
        sa.Column(
            'type',
            sa.Enum('SUPERVISOR', 'STAFF_COMMENDATION', 'SELF_COMMENDATION', name='evaluationtype'),
            nullable=False
        ),
        sa.Column('employee_id', sa.Uuid(as_uuid=True), nullable=False, index=True),
        sa.Column('evaluator_id', sa.Uuid(as_uuid=True), nullable=False, index=True),
        *[sa.Column(name, sa.Numeric(5, 2), nullable=False) for name in SCORE_COLUMNS],
        sa.Column('total_score', sa.Numeric(6, 2), nullable=False),
        sa.Column('ratio', sa.Numeric(5, 2), nullable=False, server_default='1'),
        sa.Column('percentage', sa.Numeric(5, 2), nullable=False, index=True),
        sa.Column('grade', sa.String(1), nullable=False, index=True),
        sa.Column('comments', sa.Text(), nullable=False, server_default=''),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'COMPLETE', 'INCOMPLETE', name='evaluationstatus'),
            nullable=False,
            server_default='PENDING',
            index=True
        ),
        sa.Column(
            'review_status',
            sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='reviewstatus'),
            nullable=False,
            server_default='PENDING',
            index=True
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), onupdate=sa.func.now()),
        sa.ForeignKeyConstraint(['employee_id'], ['users.id']),
        sa.ForeignKeyConstraint(['evaluator_id'], ['users.id']),
    )

    # 4. Department manager, now that users exists
    op.create_foreign_key(
        'fk_departments_manager_id_users',
        'departments', 'users',
        ['manager_id'], ['id'],
    )


def downgrade() -> None:
    """Drop the HR evaluation schema."""
    op.drop_constraint('fk_departments_manager_id_users', 'departments', type_='foreignkey')
    op.drop_table('evaluations')
    op.drop_table('users')
    op.drop_table('departments')

    op.execute("DROP TYPE IF EXISTS reviewstatus")
    op.execute("DROP TYPE IF EXISTS evaluationstatus")
    op.execute("DROP TYPE IF EXISTS evaluationtype")
    op.execute("DROP TYPE IF EXISTS gender")
    op.execute("DROP TYPE IF EXISTS userrole")
