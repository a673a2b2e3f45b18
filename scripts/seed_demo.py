# scripts/seed_demo.py
from __future__ import annotations

import argparse
import random
import sys
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from sqlalchemy import create_engine, delete, func, select
from sqlalchemy.orm import Session, sessionmaker

# Permet de lancer le script depuis la racine du projet sans souci d'import
PROJECT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_DIR))

from fieldops.core.settings import settings
from fieldops.models import (
    Client,
    Devis,
    DevisLigne,
    Facture,
    FactureLigne,
    Intervention,
    InterventionTechnicien,
    Mission,
    Rapport,
    RapportImage,
    Specialite,
    Technicien,
    TypePaiement,
)
from fieldops.services.devis_calculator import calculate_montants
from fieldops.services.numbering import DocumentKind, format_reference, parse_sequence, yearly_prefix


# ---- Données réalistes (interventions techniques, Afrique de l’Ouest / FR) ----
TYPES_PAIEMENT = [
    ("Virement 30 jours", 30),
    ("Chèque 45 jours", 45),
    ("Paiement à réception", 7),
]

SPECIALITES = ["Électricité", "Plomberie", "Climatisation", "Réseaux informatiques", "Sécurité incendie"]

ENTREPRISES = [
    "Banque Atlantique", "Hôtel Ivoire", "Clinique Sainte-Marie", "SODECI", "Orange CI",
    "Groupe Bolloré", "Pharmacie du Plateau", "Lycée Technique", "Sifca", "CIE",
]

NOMS = ["Kouassi", "Traoré", "Koné", "Yao", "Bamba", "Coulibaly", "Diallo", "N'Guessan", "Ouattara", "Konan"]
PRENOMS = ["Jean", "Awa", "Moussa", "Fatou", "Serge", "Aminata", "Eric", "Mariam", "Paul", "Ibrahim"]

NATURES = [
    "Maintenance préventive climatisation",
    "Dépannage tableau électrique",
    "Remplacement pompe de relevage",
    "Câblage baie réseau",
    "Vérification extincteurs",
]

LIGNES = [
    ("Main d’œuvre technicien (heure)", Decimal("15000")),
    ("Déplacement", Decimal("10000")),
    ("Disjoncteur différentiel 40A", Decimal("32500")),
    ("Gaz réfrigérant R410A (kg)", Decimal("18000")),
    ("Câble RJ45 cat6 (m)", Decimal("750")),
]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


class SeedNumbers:
    """Numéros séquentiels pour le seed (même format que l’API, lecture du dernier numéro une fois)."""

    def __init__(self, db: Session, today: date):
        self.next_seq: dict[DocumentKind, int] = {}
        self.prefixes = {kind: yearly_prefix(kind, today) for kind in DocumentKind}
        columns = {
            DocumentKind.MISSION: Mission.num_intervention,
            DocumentKind.DEVIS: Devis.numero,
            DocumentKind.FACTURE: Facture.numero,
        }
        for kind, column in columns.items():
            last = db.execute(
                select(column).where(column.startswith(self.prefixes[kind])).order_by(column.desc()).limit(1)
            ).scalar_one_or_none()
            self.next_seq[kind] = parse_sequence(last) + 1

    def take(self, kind: DocumentKind) -> str:
        seq = self.next_seq[kind]
        self.next_seq[kind] = seq + 1
        return format_reference(self.prefixes[kind], seq)


def reset_all(db: Session) -> None:
    # ordre inverse des FK
    for model in (
        InterventionTechnicien, Intervention, RapportImage, Rapport, FactureLigne, Facture,
        DevisLigne, Devis, Mission, Technicien, Client, Specialite, TypePaiement,
    ):
        db.execute(delete(model))
    db.commit()
    print("✅ Reset done (all demo data deleted).")


def get_or_create_referentiels(db: Session) -> tuple[list[TypePaiement], list[Specialite]]:
    types = []
    for libelle, delai in TYPES_PAIEMENT:
        tp = db.execute(select(TypePaiement).where(TypePaiement.libelle == libelle)).scalar_one_or_none()
        if tp is None:
            tp = TypePaiement(libelle=libelle, delai_paiement=delai)
            db.add(tp)
        types.append(tp)

    specialites = []
    for libelle in SPECIALITES:
        sp = db.execute(select(Specialite).where(Specialite.libelle == libelle)).scalar_one_or_none()
        if sp is None:
            sp = Specialite(libelle=libelle)
            db.add(sp)
        specialites.append(sp)

    db.flush()
    return types, specialites


def seed(reset: bool, n_clients: int, missions_per_client: int) -> None:
    engine = create_engine(settings.DATABASE_URL_SYNC, future=True)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    with SessionLocal() as db:
        if reset:
            reset_all(db)

        types, specialites = get_or_create_referentiels(db)
        numbers = SeedNumbers(db, date.today())

        # Techniciens (un par spécialité au minimum)
        techniciens = []
        for i, sp in enumerate(specialites * 2):
            tech = Technicien(
                nom=random.choice(NOMS),
                prenom=random.choice(PRENOMS),
                contact=f"+225 07 {random.randint(10, 99)} {random.randint(10, 99)} {random.randint(10, 99)} {i:02d}",
                specialite_id=sp.id,
            )
            db.add(tech)
            techniciens.append(tech)
        db.flush()

        offset = db.execute(select(func.count()).select_from(Client)).scalar_one()
        counts = {"missions": 0, "interventions": 0, "devis": 0, "factures": 0, "rapports": 0}

        for c in range(n_clients):
            entreprise = random.choice(ENTREPRISES)
            domaine = entreprise.lower().replace(" ", "-").replace("'", "")
            client = Client(
                nom=f"{random.choice(PRENOMS)} {random.choice(NOMS)}",
                email=f"contact{offset + c + 1}@{domaine}.ci",
                telephone=f"07 {random.randint(10, 99)} {random.randint(10, 99)} {random.randint(10, 99)} {random.randint(10, 99)}",
                entreprise=entreprise,
                localisation="Abidjan",
                type_paiement_id=random.choice(types).id,
            )
            db.add(client)
            db.flush()

            for _ in range(missions_per_client):
                sortie = now_utc() + timedelta(days=random.randint(-60, 30))
                mission = Mission(
                    num_intervention=numbers.take(DocumentKind.MISSION),
                    nature_intervention=random.choice(NATURES),
                    objectif_du_contrat="Rétablir le fonctionnement nominal de l’installation",
                    priorite=random.choice(["normale", "normale", "urgente"]),
                    statut="en_cours" if sortie <= now_utc() else "planifiee",
                    date_sortie_fiche_intervention=sortie,
                    client_id=client.id,
                )
                db.add(mission)
                db.flush()
                counts["missions"] += 1

                # Créneau de 2 h le jour de sortie de fiche
                debut = sortie.replace(hour=8, minute=0, second=0, microsecond=0)
                db.add(
                    Intervention(
                        mission_id=mission.id,
                        date_heure_debut=debut,
                        date_heure_fin=debut + timedelta(hours=2),
                        duree=120,
                        techniciens=[InterventionTechnicien(technicien_id=random.choice(techniciens).id)],
                    )
                )
                counts["interventions"] += 1

                # Rapport sur les missions déjà démarrées
                if mission.statut == "en_cours":
                    db.add(
                        Rapport(
                            titre=f"Rapport {mission.num_intervention}",
                            contenu="Intervention réalisée, installation contrôlée et remise en service.",
                            mission_id=mission.id,
                            technicien_id=random.choice(techniciens).id,
                            images=[RapportImage(url=f"/uploads/{mission.num_intervention}-1.jpg", ordre=1)],
                        )
                    )
                    counts["rapports"] += 1

                if random.random() < 0.6:
                    devis = _seed_devis(db, numbers, client, mission)
                    counts["devis"] += 1
                    if devis.statut == "accepte_client":
                        _seed_facture(db, numbers, client, devis)
                        counts["factures"] += 1

            db.commit()

        print("✅ Seed terminé.")
        print(f"   - Clients ajoutés: {n_clients}")
        for key, value in counts.items():
            print(f"   - {key.capitalize()} créé(e)s: {value}")


def _seed_devis(db: Session, numbers: SeedNumbers, client: Client, mission: Mission) -> Devis:
    picked = random.sample(LIGNES, k=random.randint(1, 3))
    lignes = [
        DevisLigne(designation=designation, quantite=Decimal(random.randint(1, 6)), prix_unitaire=prix, ordre=i)
        for i, (designation, prix) in enumerate(picked, start=1)
    ]
    taux_tva = Decimal("18")
    montants = calculate_montants(lignes, taux_tva)
    for ligne, montant in zip(lignes, montants.lignes_ht):
        ligne.montant_ht = montant

    devis = Devis(
        numero=numbers.take(DocumentKind.DEVIS),
        client_id=client.id,
        mission_id=mission.id,
        titre=f"Devis {mission.nature_intervention.lower()}",
        taux_tva=taux_tva,
        montant_ht=montants.montant_ht,
        montant_tva=montants.montant_tva,
        montant_ttc=montants.montant_ttc,
        statut=random.choice(["brouillon", "en_attente", "valide_dg", "accepte_client"]),
        date_validite=date.today() + timedelta(days=30),
        lignes=lignes,
    )
    db.add(devis)
    db.flush()
    return devis


def _seed_facture(db: Session, numbers: SeedNumbers, client: Client, devis: Devis) -> None:
    # Échéance parfois dépassée (alimente /api/factures/overdue)
    emission = date.today() - timedelta(days=random.randint(0, 60))
    db.add(
        Facture(
            numero=numbers.take(DocumentKind.FACTURE),
            devis_id=devis.id,
            client_id=client.id,
            montant_ht=devis.montant_ht,
            taux_tva=devis.taux_tva,
            montant_ttc=devis.montant_ttc,
            date_echeance=emission + timedelta(days=30),
            lignes=[
                FactureLigne(
                    designation=li.designation,
                    quantite=li.quantite,
                    prix_unitaire=li.prix_unitaire,
                    montant_ht=li.montant_ht,
                    ordre=li.ordre,
                )
                for li in devis.lignes
            ],
        )
    )
    devis.statut = "facture"


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="Supprime les données demo avant de reseed")
    parser.add_argument("--clients", type=int, default=20, help="Nombre de clients à générer")
    parser.add_argument("--missions", type=int, default=3, help="Missions par client")
    parser.add_argument("--seed", type=int, default=42, help="Seed RNG pour reproductibilité")
    args = parser.parse_args()

    random.seed(args.seed)
    seed(reset=args.reset, n_clients=args.clients, missions_per_client=args.missions)


if __name__ == "__main__":
    main()
