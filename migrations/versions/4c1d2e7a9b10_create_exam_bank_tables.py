"""create exam bank tables

Revision ID: 4c1d2e7a9b10
Revises:
Create Date: 2026-10-19 09:12:40.418223

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4c1d2e7a9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'subjects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subjects_id'), 'subjects', ['id'], unique=False)
    op.create_index(op.f('ix_subjects_name'), 'subjects', ['name'], unique=False)

    op.create_table(
        'parts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_parts_id'), 'parts', ['id'], unique=False)
    op.create_index(op.f('ix_parts_name'), 'parts', ['name'], unique=False)

    op.create_table(
        'exams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['subject_id'], ['subjects.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_exams_id'), 'exams', ['id'], unique=False)
    op.create_index(op.f('ix_exams_name'), 'exams', ['name'], unique=False)

    op.create_table(
        'exam_parts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('exam_id', sa.Integer(), nullable=False),
        sa.Column('part_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ),
        sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('exam_id', 'part_id', name='uq_exam_parts_exam_part')
    )
    op.create_index(op.f('ix_exam_parts_id'), 'exam_parts', ['id'], unique=False)
    op.create_index(op.f('ix_exam_parts_exam_id'), 'exam_parts', ['exam_id'], unique=False)
    op.create_index(op.f('ix_exam_parts_part_id'), 'exam_parts', ['part_id'], unique=False)

    op.create_table(
        'question_groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('part_id', sa.Integer(), nullable=False),
        sa.Column('exam_id', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('type_group', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=True),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ),
        sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('exam_id', 'part_id', 'order', name='uq_question_groups_scope_order')
    )
    op.create_index(op.f('ix_question_groups_id'), 'question_groups', ['id'], unique=False)
    op.create_index(op.f('ix_question_groups_exam_id'), 'question_groups', ['exam_id'], unique=False)
    op.create_index(op.f('ix_question_groups_part_id'), 'question_groups', ['part_id'], unique=False)

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=False),
        sa.Column('exam_id', sa.Integer(), nullable=False),
        sa.Column('part_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=True),
        sa.Column('option', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('correct_option', sa.String(), nullable=False),
        sa.Column('score', sa.Float(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('global_order', sa.Integer(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['exam_id'], ['exams.id'], ),
        sa.ForeignKeyConstraint(['group_id'], ['question_groups.id'], ),
        sa.ForeignKeyConstraint(['part_id'], ['parts.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('exam_id', 'part_id', 'order', name='uq_questions_scope_order'),
        sa.UniqueConstraint('exam_id', 'global_order', name='uq_questions_exam_global_order')
    )
    op.create_index(op.f('ix_questions_id'), 'questions', ['id'], unique=False)
    op.create_index(op.f('ix_questions_group_id'), 'questions', ['group_id'], unique=False)
    op.create_index(op.f('ix_questions_exam_id'), 'questions', ['exam_id'], unique=False)
    op.create_index(op.f('ix_questions_part_id'), 'questions', ['part_id'], unique=False)

    typeelement = postgresql.ENUM('IMAGE', 'AUDIO', name='elementtypeenum', create_type=False)
    typeelement.create(op.get_bind(), checkfirst=True)
    op.create_table(
        'elements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', typeelement, nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=True),
        sa.Column('question_id', sa.Integer(), nullable=True),
        sa.Column('cloud_id', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.CheckConstraint(
            '(group_id IS NULL AND question_id IS NOT NULL) OR (group_id IS NOT NULL AND question_id IS NULL)',
            name='ck_elements_single_owner'
        ),
        sa.ForeignKeyConstraint(['group_id'], ['question_groups.id'], ),
        sa.ForeignKeyConstraint(['question_id'], ['questions.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_elements_id'), 'elements', ['id'], unique=False)
    op.create_index(op.f('ix_elements_group_id'), 'elements', ['group_id'], unique=False)
    op.create_index(op.f('ix_elements_question_id'), 'elements', ['question_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_elements_question_id'), table_name='elements')
    op.drop_index(op.f('ix_elements_group_id'), table_name='elements')
    op.drop_index(op.f('ix_elements_id'), table_name='elements')
    op.drop_table('elements')
    postgresql.ENUM(name='elementtypeenum').drop(op.get_bind(), checkfirst=True)
    op.drop_index(op.f('ix_questions_part_id'), table_name='questions')
    op.drop_index(op.f('ix_questions_exam_id'), table_name='questions')
    op.drop_index(op.f('ix_questions_group_id'), table_name='questions')
    op.drop_index(op.f('ix_questions_id'), table_name='questions')
    op.drop_table('questions')
    op.drop_index(op.f('ix_question_groups_part_id'), table_name='question_groups')
    op.drop_index(op.f('ix_question_groups_exam_id'), table_name='question_groups')
    op.drop_index(op.f('ix_question_groups_id'), table_name='question_groups')
    op.drop_table('question_groups')
    op.drop_index(op.f('ix_exam_parts_part_id'), table_name='exam_parts')
    op.drop_index(op.f('ix_exam_parts_exam_id'), table_name='exam_parts')
    op.drop_index(op.f('ix_exam_parts_id'), table_name='exam_parts')
    op.drop_table('exam_parts')
    op.drop_index(op.f('ix_exams_name'), table_name='exams')
    op.drop_index(op.f('ix_exams_id'), table_name='exams')
    op.drop_table('exams')
    op.drop_index(op.f('ix_parts_name'), table_name='parts')
    op.drop_index(op.f('ix_parts_id'), table_name='parts')
    op.drop_table('parts')
    op.drop_index(op.f('ix_subjects_name'), table_name='subjects')
    op.drop_index(op.f('ix_subjects_id'), table_name='subjects')
    op.drop_table('subjects')
