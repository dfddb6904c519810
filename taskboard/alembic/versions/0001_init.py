from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

global_role = sa.Enum('admin', 'project_manager', 'member', name='globalrole')
project_role = sa.Enum('project_manager', 'member', name='projectrole')
project_status = sa.Enum('active', 'archived', name='projectstatus')
task_status = sa.Enum('todo', 'in_progress', 'done', name='taskstatus')
task_priority = sa.Enum('low', 'medium', 'high', name='taskpriority')

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(), nullable=False),
        sa.Column('role', global_role, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()))
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_table('projects',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', project_status, nullable=False, index=True),
        sa.Column('owner_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()))
    op.create_table('project_members',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('role', project_role, nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.UniqueConstraint('project_id', 'user_id', name='uq_project_user'))
    op.create_table('tasks',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('project_id', sa.Integer(), sa.ForeignKey('projects.id'), nullable=False, index=True),
        sa.Column('title', sa.String(), nullable=False, index=True),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('status', task_status, nullable=False, index=True),
        sa.Column('priority', task_priority, nullable=False, index=True),
        sa.Column('due_date', sa.DateTime(timezone=True), index=True),
        sa.Column('assignee_id', sa.Integer(), sa.ForeignKey('users.id'), index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()))
    op.create_table('revoked_tokens',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('token', sa.String(), nullable=False, unique=True),
        sa.Column('expires_at', sa.DateTime(), nullable=False, index=True))
    op.create_index('ix_revoked_tokens_token', 'revoked_tokens', ['token'])

def downgrade():
    op.drop_table('revoked_tokens')
    op.drop_table('tasks')
    op.drop_table('project_members')
    op.drop_table('projects')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
    bind = op.get_bind()
    for enum_type in (task_priority, task_status, project_status, project_role, global_role):
        enum_type.drop(bind, checkfirst=True)
