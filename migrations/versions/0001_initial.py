"""initial tables

Revision ID: 0001
Revises: 
Create Date: 2025-03-20

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _named_table(table: str, column: str):
    op.create_table(table,
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column(column, sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(column, name=f'uq_{table}_{column}'),
    )


def upgrade():
    _named_table('buildings', 'building_name')
    _named_table('tracks', 'track_name')
    _named_table('departments', 'department_name')
    _named_table('sections', 'section_name')

    op.create_table('u_users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('firstname', sa.String(255), nullable=False),
        sa.Column('lastname', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(16), nullable=False),
        sa.Column('activate', sa.Boolean(), nullable=False, server_default=sa.text('1')),
        *_timestamps(),
    )
    op.create_index('ix_u_users_email', 'u_users', ['email'], unique=True)
    op.create_index('ix_u_users_role', 'u_users', ['role'])

    op.create_table('personal_access_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('u_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('last_used_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('token', name='uq_personal_access_tokens_token'),
    )
    op.create_index('ix_personal_access_tokens_user_id', 'personal_access_tokens', ['user_id'])

    op.create_table('rooms',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('room_name', sa.String(255), nullable=False),
        sa.Column('room_number', sa.String(50), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id', ondelete='RESTRICT'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_rooms_building_id', 'rooms', ['building_id'])

    op.create_table('tbdrs_merge',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('track_id', sa.Integer(), sa.ForeignKey('tracks.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('building_id', sa.Integer(), sa.ForeignKey('buildings.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('department_id', sa.Integer(), sa.ForeignKey('departments.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('section_id', sa.Integer(), sa.ForeignKey('sections.id', ondelete='RESTRICT'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('track_id', 'building_id', 'department_id', 'section_id',
                            name='uq_tbdrs_merge_combination'),
    )

    op.create_table('std_tbdrs_merge',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('uusers_id', sa.Integer(), sa.ForeignKey('u_users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('tbdrs_id', sa.Integer(), sa.ForeignKey('tbdrs_merge.id', ondelete='CASCADE'), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('uusers_id', 'tbdrs_id', name='uq_std_tbdrs_merge_user_tbdrs'),
    )
    op.create_index('ix_std_tbdrs_merge_uusers_id', 'std_tbdrs_merge', ['uusers_id'])


def downgrade():
    op.drop_index('ix_std_tbdrs_merge_uusers_id', table_name='std_tbdrs_merge')
    op.drop_table('std_tbdrs_merge')
    op.drop_table('tbdrs_merge')
    op.drop_index('ix_rooms_building_id', table_name='rooms')
    op.drop_table('rooms')
    op.drop_index('ix_personal_access_tokens_user_id', table_name='personal_access_tokens')
    op.drop_table('personal_access_tokens')
    op.drop_index('ix_u_users_role', table_name='u_users')
    op.drop_index('ix_u_users_email', table_name='u_users')
    op.drop_table('u_users')
    for table in ('sections', 'departments', 'tracks', 'buildings'):
        op.drop_table(table)
