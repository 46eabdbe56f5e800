'''Initial church directory schema'''
from alembic import op
import sqlalchemy as sa
from sqlalchemy.sql import func

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

weekday = sa.Enum('SUNDAY', 'MONDAY', 'TUESDAY', 'WEDNESDAY', 'THURSDAY', 'FRIDAY', 'SATURDAY', name='weekday')
user_role = sa.Enum('SUPER_ADMIN', 'ADMIN', 'USER', name='userrole')
user_status = sa.Enum('ACTIVE', 'DISABLED', name='userstatus')
claim_status = sa.Enum('PENDING', name='claimstatus')


def upgrade():
    op.create_table('churches',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('denomination', sa.String(), nullable=False),
                    sa.Column('address', sa.String(), nullable=True),
                    sa.Column('city', sa.String(), nullable=True),
                    sa.Column('state', sa.String(), nullable=True),
                    sa.Column('zip_code', sa.String(), nullable=True),
                    sa.Column('country', sa.String(), server_default='US', nullable=False),
                    sa.Column('latitude', sa.Float(), nullable=False),
                    sa.Column('longitude', sa.Float(), nullable=False),
                    sa.Column('phone', sa.String(), nullable=True),
                    sa.Column('email', sa.String(), nullable=True),
                    sa.Column('website', sa.String(), nullable=True),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('founded_year', sa.Integer(), nullable=True),
                    sa.Column('average_attendance', sa.Integer(), nullable=True),
                    sa.Column('image_url', sa.String(), nullable=True),
                    sa.Column('verified', sa.Boolean(), server_default=sa.false(), nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.PrimaryKeyConstraint('id')
                   )
    op.create_index('ix_churches_id', 'churches', ['id'])
    op.create_index('ix_churches_location', 'churches', ['latitude', 'longitude'])
    op.create_index('ix_churches_state_city', 'churches', ['state', 'city'])
    op.create_index('ix_churches_denomination', 'churches', ['denomination'])

    op.create_table('languages',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(), nullable=False),
                    sa.Column('description', sa.Text(), nullable=True),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('name')
                   )
    op.create_index('ix_languages_id', 'languages', ['id'])

    op.create_table('church_languages',
                    sa.Column('church_id', sa.Integer(), nullable=False),
                    sa.Column('language_id', sa.Integer(), nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['language_id'], ['languages.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('church_id', 'language_id')
                   )

    op.create_table('service_times',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('church_id', sa.Integer(), nullable=False),
                    sa.Column('day', weekday, nullable=False),
                    sa.Column('time_label', sa.String(), nullable=False),
                    sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('church_id', 'day', 'time_label', name='uq_service_time')
                   )
    op.create_index('ix_service_times_id', 'service_times', ['id'])
    op.create_index('ix_service_times_church_id', 'service_times', ['church_id'])

    op.create_table('users',
                    sa.Column('id', sa.Uuid(), nullable=False),
                    sa.Column('email', sa.String(), nullable=False),
                    sa.Column('display_name', sa.String(), nullable=False),
                    sa.Column('hashed_password', sa.String(), nullable=False),
                    sa.Column('role', user_role, nullable=False),
                    sa.Column('status', user_status, nullable=False),
                    sa.Column('home_latitude', sa.Float(), nullable=True),
                    sa.Column('home_longitude', sa.Float(), nullable=True),
                    sa.Column('home_city', sa.String(), nullable=True),
                    sa.Column('home_state', sa.String(), nullable=True),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.Column('updated_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.PrimaryKeyConstraint('id')
                   )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('favorites',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('user_id', sa.Uuid(), nullable=False),
                    sa.Column('church_id', sa.Integer(), nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('user_id', 'church_id', name='uq_favorite_user_church')
                   )
    op.create_index('ix_favorites_id', 'favorites', ['id'])
    op.create_index('ix_favorites_user_id', 'favorites', ['user_id'])

    op.create_table('check_ins',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('user_id', sa.Uuid(), nullable=False),
                    sa.Column('church_id', sa.Integer(), nullable=False),
                    sa.Column('visit_date', sa.Date(), nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('user_id', 'church_id', 'visit_date', name='uq_check_in_user_church_date')
                   )
    op.create_index('ix_check_ins_id', 'check_ins', ['id'])
    op.create_index('ix_check_ins_user_id', 'check_ins', ['user_id'])
    op.create_index('ix_check_ins_church_id', 'check_ins', ['church_id'])

    op.create_table('church_claims',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('church_id', sa.Integer(), nullable=False),
                    sa.Column('user_id', sa.Uuid(), nullable=False),
                    sa.Column('message', sa.Text(), nullable=True),
                    sa.Column('status', claim_status, nullable=False),
                    sa.Column('created_at', sa.DateTime(timezone=True), server_default=func.now(), nullable=False),
                    sa.ForeignKeyConstraint(['church_id'], ['churches.id'], ondelete='CASCADE'),
                    sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                   )
    op.create_index('ix_church_claims_id', 'church_claims', ['id'])
    op.create_index('ix_church_claims_church_id', 'church_claims', ['church_id'])
    op.create_index('ix_church_claims_user_id', 'church_claims', ['user_id'])


def downgrade():
    op.drop_table('church_claims')
    op.drop_table('check_ins')
    op.drop_table('favorites')
    op.drop_table('users')
    op.drop_table('service_times')
    op.drop_table('church_languages')
    op.drop_table('languages')
    op.drop_table('churches')

    bind = op.get_bind()
    for enum_type in (claim_status, user_status, user_role, weekday):
        enum_type.drop(bind, checkfirst=True)
