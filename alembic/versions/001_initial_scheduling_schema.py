"""Initial scheduling schema

Revision ID: 001
Revises:
Create Date: 2025-01-21 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

APPOINTMENT_STATUSES = ('PENDING_APPROVAL', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW')
CLINIC_ROLES = ('OWNER', 'ADMIN', 'VET')
MEMBER_STATUSES = ('ACTIVE', 'INVITED', 'INACTIVE')
VETERINARIAN_STATUSES = ('ACTIVE', 'INACTIVE')


def _audit_columns():
    return [
        sa.Column('id', postgresql.UUID(as_uuid=True), server_default=sa.text('gen_random_uuid()'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('created_by', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('updated_by', postgresql.UUID(as_uuid=True), nullable=True),
    ]


def upgrade() -> None:
    # btree_gist lets the exclusion constraint mix "=" on UUIDs with "&&" on ranges
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")

    # Create enum types
    op.execute("CREATE TYPE appointmentstatus AS ENUM ('PENDING_APPROVAL', 'CONFIRMED', 'COMPLETED', 'CANCELLED', 'NO_SHOW')")
    op.execute("CREATE TYPE clinicrole AS ENUM ('OWNER', 'ADMIN', 'VET')")
    op.execute("CREATE TYPE memberstatus AS ENUM ('ACTIVE', 'INVITED', 'INACTIVE')")
    op.execute("CREATE TYPE veterinarianstatus AS ENUM ('ACTIVE', 'INACTIVE')")

    # Create users table
    op.create_table('users',
        *_audit_columns(),
        sa.Column('first_name', sa.String(length=100), nullable=False, comment="User's first name"),
        sa.Column('last_name', sa.String(length=100), nullable=False, comment="User's last name"),
        sa.Column('email', sa.String(length=255), nullable=False, comment="User's email address"),
        sa.Column('phone_number', sa.String(length=20), nullable=True, comment="User's phone number"),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Create veterinarians table
    op.create_table('veterinarians',
        *_audit_columns(),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False, comment='Login and invitation email'),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('license_number', sa.String(length=50), nullable=True),
        sa.Column('status', postgresql.ENUM(*VETERINARIAN_STATUSES, name='veterinarianstatus', create_type=False), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_veterinarians_email', 'veterinarians', ['email'], unique=True)
    op.create_index('idx_veterinarians_name', 'veterinarians', ['last_name', 'first_name'])

    # Create pets table
    op.create_table('pets',
        *_audit_columns(),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('species', sa.String(length=50), nullable=False),
        sa.Column('breed', sa.String(length=100), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_pets_owner_id', 'pets', ['owner_id'])

    # Create clinics table
    op.create_table('clinics',
        *_audit_columns(),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('phone_number', sa.String(length=20), nullable=True),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('is_personal', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.CheckConstraint('latitude IS NULL OR (latitude >= -90 AND latitude <= 90)', name='ck_clinics_latitude_range'),
        sa.CheckConstraint('longitude IS NULL OR (longitude >= -180 AND longitude <= 180)', name='ck_clinics_longitude_range'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_clinics_name', 'clinics', ['name'])

    # Create clinic_members table
    op.create_table('clinic_members',
        *_audit_columns(),
        sa.Column('clinic_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('veterinarian_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', postgresql.ENUM(*CLINIC_ROLES, name='clinicrole', create_type=False), nullable=False),
        sa.Column('status', postgresql.ENUM(*MEMBER_STATUSES, name='memberstatus', create_type=False), nullable=False),
        sa.Column('is_available', sa.Boolean(), server_default=sa.text('true'), nullable=False),
        sa.ForeignKeyConstraint(['clinic_id'], ['clinics.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['veterinarian_id'], ['veterinarians.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('clinic_id', 'veterinarian_id', name='uq_clinic_members_clinic_vet'),
    )
    op.create_index('ix_clinic_members_clinic_id', 'clinic_members', ['clinic_id'])
    op.create_index('ix_clinic_members_veterinarian_id', 'clinic_members', ['veterinarian_id'])
    op.create_index('ix_clinic_members_status', 'clinic_members', ['status'])
    op.create_index('idx_clinic_members_vet_status', 'clinic_members', ['veterinarian_id', 'status'])

    # Create appointments table
    op.create_table('appointments',
        *_audit_columns(),
        sa.Column('clinic_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('veterinarian_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('pet_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('start_at', sa.DateTime(timezone=True), nullable=False, comment='Start of the visit (inclusive)'),
        sa.Column('end_at', sa.DateTime(timezone=True), nullable=False, comment='End of the visit (exclusive)'),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('status', postgresql.ENUM(*APPOINTMENT_STATUSES, name='appointmentstatus', create_type=False), server_default='PENDING_APPROVAL', nullable=False),
        sa.CheckConstraint('start_at < end_at', name='ck_appointments_start_before_end'),
        sa.ForeignKeyConstraint(['clinic_id'], ['clinics.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['veterinarian_id'], ['veterinarians.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['pet_id'], ['pets.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_appointments_clinic_id', 'appointments', ['clinic_id'])
    op.create_index('ix_appointments_veterinarian_id', 'appointments', ['veterinarian_id'])
    op.create_index('ix_appointments_pet_id', 'appointments', ['pet_id'])
    op.create_index('ix_appointments_start_at', 'appointments', ['start_at'])
    op.create_index('ix_appointments_status', 'appointments', ['status'])
    op.create_index('idx_appointments_vet_start', 'appointments', ['veterinarian_id', 'start_at'])
    op.create_index('idx_appointments_vet_clinic_start', 'appointments', ['veterinarian_id', 'clinic_id', 'start_at'])
    op.create_index('idx_appointments_clinic_status', 'appointments', ['clinic_id', 'status'])

    # No two live appointments of one vet at one clinic may overlap
    op.execute("""
        ALTER TABLE appointments
        ADD CONSTRAINT ex_appointments_no_overlap
        EXCLUDE USING gist (
            veterinarian_id WITH =,
            clinic_id WITH =,
            tstzrange(start_at, end_at, '[)') WITH &&
        )
        WHERE (veterinarian_id IS NOT NULL AND status NOT IN ('CANCELLED', 'NO_SHOW'))
    """)


def downgrade() -> None:
    op.execute("ALTER TABLE appointments DROP CONSTRAINT IF EXISTS ex_appointments_no_overlap")

    # Drop tables in reverse dependency order
    op.drop_table('appointments')
    op.drop_table('clinic_members')
    op.drop_table('clinics')
    op.drop_table('pets')
    op.drop_table('veterinarians')
    op.drop_table('users')

    # Drop enum types
    op.execute("DROP TYPE IF EXISTS appointmentstatus")
    op.execute("DROP TYPE IF EXISTS clinicrole")
    op.execute("DROP TYPE IF EXISTS memberstatus")
    op.execute("DROP TYPE IF EXISTS veterinarianstatus")
