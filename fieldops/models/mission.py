from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fieldops.db.base import Base

"""
Model Mission.

Rôle (fonctionnel) :
- Intervention planifiée chez un client (fiche d’intervention).
- Identifiée côté métier par son numéro `num_intervention` (INT-YYYY-NNNN), attribué à la création
  et immuable ensuite.

Contraintes :
- num_intervention unique : c’est la contrainte qui garantit réellement l’unicité des numéros
  (le générateur lit le dernier numéro puis incrémente, sans verrou).
"""


class Mission(Base):
    __tablename__ = "missions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    num_intervention: Mapped[str] = mapped_column(String(32), nullable=False, unique=True)

    nature_intervention: Mapped[str] = mapped_column(String(255), nullable=False)
    objectif_du_contrat: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # normale | urgente
    priorite: Mapped[str] = mapped_column(String(20), nullable=False, default="normale")

    # planifiee | en_cours | terminee | annulee
    statut: Mapped[str] = mapped_column(String(20), nullable=False, default="planifiee", index=True)

    date_sortie_fiche_intervention: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)

    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("clients.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    client = relationship("Client", lazy="joined")
