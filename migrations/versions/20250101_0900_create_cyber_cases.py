"""create_cyber_cases_table

Revision ID: 20250101_0900_cyber_cases
Revises:
Create Date: 2025-01-01 09:00:00.000000

Tabla de casos de ciberdelitos:
- Número de expediente único
- Importe con precisión fija (15, 2) y no negativo
- Índices para filtros (tipo de delito, fecha, estado) y orden por creación
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20250101_0900_cyber_cases'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'cyber_cases',

        # =========================================================
        # IDENTIFICACIÓN
        # =========================================================
        sa.Column('id', sa.String(length=36), nullable=False, comment='ID interno (UUID)'),
        sa.Column('expedient_number', sa.String(length=100), nullable=False, comment='Número de expediente externo'),

        # =========================================================
        # DATOS DEL CASO
        # =========================================================
        sa.Column('case_date', sa.Date(), nullable=False, comment='Fecha del caso'),
        sa.Column('crime_type', sa.String(length=100), nullable=False, comment='Tipo de delito'),
        sa.Column('sender_account_data', sa.Text(), nullable=False, comment='Datos de la cuenta emisora'),
        sa.Column('victim', sa.String(length=255), nullable=False, comment='Víctima'),
        sa.Column('receiver_account_data', sa.Text(), nullable=False, comment='Datos de la cuenta receptora'),
        sa.Column('receiver_account_research', sa.Text(), nullable=True, comment='Investigación de la cuenta receptora'),
        sa.Column('investigation_status', sa.String(length=50), nullable=False, server_default='Pendiente', comment='Estado de la investigación'),
        sa.Column('stolen_amount', sa.Numeric(precision=15, scale=2), nullable=False, comment='Importe sustraído'),
        sa.Column('observations', sa.Text(), nullable=True, comment='Observaciones'),

        # =========================================================
        # AUDITORÍA
        # =========================================================
        sa.Column('created_by', sa.String(length=100), nullable=False, comment='Usuario que registró el caso'),
        sa.Column('created_at', sa.DateTime(), nullable=False, comment='Fecha creación (UTC)'),
        sa.Column('updated_at', sa.DateTime(), nullable=False, comment='Fecha última actualización (UTC)'),

        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('stolen_amount >= 0', name='ck_cyber_cases_stolen_amount_non_negative'),
    )

    op.create_index('ix_cyber_cases_expedient_number', 'cyber_cases', ['expedient_number'], unique=True)
    op.create_index('ix_cyber_cases_case_date', 'cyber_cases', ['case_date'])
    op.create_index('ix_cyber_cases_crime_type', 'cyber_cases', ['crime_type'])
    op.create_index('ix_cyber_cases_investigation_status', 'cyber_cases', ['investigation_status'])
    op.create_index('ix_cyber_cases_created_at_id', 'cyber_cases', ['created_at', 'id'])


def downgrade() -> None:
    op.drop_index('ix_cyber_cases_created_at_id', table_name='cyber_cases')
    op.drop_index('ix_cyber_cases_investigation_status', table_name='cyber_cases')
    op.drop_index('ix_cyber_cases_crime_type', table_name='cyber_cases')
    op.drop_index('ix_cyber_cases_case_date', table_name='cyber_cases')
    op.drop_index('ix_cyber_cases_expedient_number', table_name='cyber_cases')
    op.drop_table('cyber_cases')
