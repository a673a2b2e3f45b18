from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

"""
DB Base.

Rôle (fonctionnel) :
- Définit la classe Base commune à tous les modèles ORM (clients, missions, devis, factures…).
- Fixe une convention de nommage des index / contraintes : les noms générés sont stables
  entre PostgreSQL et SQLite, et les migrations Alembic peuvent les référencer
  (ex : uq_missions_num_intervention).
"""

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Classe racine ORM (SQLAlchemy Declarative)."""
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
