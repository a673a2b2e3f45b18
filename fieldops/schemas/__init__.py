"""
fieldops.schemas

Package des schémas API (Pydantic).

Rôle (fonctionnel) :
- Définit les contrats d’entrée/sortie de l’API (création, mise à jour, lecture).
- Sépare les modèles ORM (fieldops.models = persistance) des schémas (contrat HTTP / validation).
- common : enveloppe {success, message, data, meta} partagée par toutes les routes.
"""
