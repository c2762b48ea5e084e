"""overdue reminder marker and restrict deleting identified cattle

Revision ID: 7b2d9e4c1f3a
Revises: 4f1c2b7e9a01
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '7b2d9e4c1f3a'
down_revision: Union[str, Sequence[str], None] = '4f1c2b7e9a01'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

FK_NAME = 'fk_identification_requests_result_cattle_ref_cattle'


def upgrade() -> None:
    op.add_column(
        'cattle', sa.Column('overdue_notified_at', sa.DateTime(timezone=True), nullable=True)
    )
    op.drop_constraint(FK_NAME, 'identification_requests', type_='foreignkey')
    op.create_foreign_key(
        FK_NAME,
        'identification_requests',
        'cattle',
        ['result_cattle_ref'],
        ['id'],
        ondelete='RESTRICT',
    )


def downgrade() -> None:
    op.drop_constraint(FK_NAME, 'identification_requests', type_='foreignkey')
    op.create_foreign_key(
        FK_NAME,
        'identification_requests',
        'cattle',
        ['result_cattle_ref'],
        ['id'],
        ondelete='SET NULL',
    )
    op.drop_column('cattle', 'overdue_notified_at')
