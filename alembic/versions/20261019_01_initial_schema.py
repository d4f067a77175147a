from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_01_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'docs',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('storage_path', sa.String(), nullable=False, unique=True),
        sa.Column('size', sa.Integer(), nullable=False),
        sa.Column('mime_type', sa.String(), nullable=False),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_docs_name', 'docs', ['name'])
    op.create_index('ix_docs_owner_id', 'docs', ['owner_id'])
    op.create_index('ix_docs_created_at', 'docs', ['created_at'])

    op.create_table(
        'links',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('url', sa.String(), nullable=False),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_links_owner_id', 'links', ['owner_id'])
    op.create_index('ix_links_created_at', 'links', ['created_at'])

    op.create_table(
        'memos',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False, server_default=''),
        sa.Column('owner_id', sa.String(length=36), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_memos_owner_id', 'memos', ['owner_id'])
    op.create_index('ix_memos_created_at', 'memos', ['created_at'])


def downgrade() -> None:
    op.drop_table('memos')
    op.drop_table('links')
    op.drop_table('docs')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
