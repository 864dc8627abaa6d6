"""create organization and class_attendance tables

Revision ID: 5b1e7c2d9a40
Revises:
Create Date: 2026-02-02 10:12:44.201337

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e7c2d9a40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'main_branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
    )
    op.create_index('ix_main_branches_id', 'main_branches', ['id'])

    op.create_table(
        'sub_branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('main_branch_id', sa.Integer(), sa.ForeignKey('main_branches.id'), nullable=True),
    )
    op.create_index('ix_sub_branches_id', 'sub_branches', ['id'])
    op.create_index('ix_sub_branches_main_branch_id', 'sub_branches', ['main_branch_id'])

    op.create_table(
        'classrooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('sub_branch_id', sa.Integer(), sa.ForeignKey('sub_branches.id'), nullable=True),
    )
    op.create_index('ix_classrooms_id', 'classrooms', ['id'])
    op.create_index('ix_classrooms_sub_branch_id', 'classrooms', ['sub_branch_id'])

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('main_branch_id', sa.Integer(), sa.ForeignKey('main_branches.id'), nullable=True),
        sa.Column('sub_branch_id', sa.Integer(), sa.ForeignKey('sub_branches.id'), nullable=True),
        sa.Column('classroom_id', sa.Integer(), sa.ForeignKey('classrooms.id'), nullable=True),
        sa.Column('class_start_date', sa.Date(), nullable=True),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_main_branch_id', 'classes', ['main_branch_id'])
    op.create_index('ix_classes_sub_branch_id', 'classes', ['sub_branch_id'])
    op.create_index('ix_classes_classroom_id', 'classes', ['classroom_id'])

    op.create_table(
        'class_attendance',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('attendance_date', sa.Date(), nullable=False),
        sa.Column('attendance_status', sa.Integer(), nullable=False),
        sa.Column('learning_progress', sa.String(), nullable=True),
        sa.Column('lamrin_page', sa.Integer(), nullable=True),
        sa.Column('lamrin_line', sa.Integer(), nullable=True),
        sa.UniqueConstraint('class_id', 'student_id', 'attendance_date',
                            name='uq_class_attendance_student_day'),
    )
    op.create_index('ix_class_attendance_id', 'class_attendance', ['id'])
    op.create_index('ix_class_attendance_class_id', 'class_attendance', ['class_id'])
    op.create_index('ix_class_attendance_attendance_date', 'class_attendance', ['attendance_date'])


def downgrade() -> None:
    op.drop_table('class_attendance')
    op.drop_table('classes')
    op.drop_table('classrooms')
    op.drop_table('sub_branches')
    op.drop_table('main_branches')
