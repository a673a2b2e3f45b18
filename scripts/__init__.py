"""
scripts

Package utilitaire pour les scripts de maintenance / data.

Rôle (fonctionnel) :
- Contient des scripts exécutables (CLI) liés au projet, par exemple :
  - génération de données de démonstration (seed_demo)

Note :
- Les scripts ne contiennent pas de logique métier “centrale” :
  ils réutilisent les modules de `fieldops/` (modèles, numérotation, calcul des devis).
"""
