"""
fieldops.db

Package base de données : base déclarative, engine async et sessions.

Contenu :
- base : classe Base SQLAlchemy (+ convention de nommage des contraintes, utile pour Alembic).
- session : engine async, factory de sessions, dépendance FastAPI get_db().
- store : capacité “store” injectable (dernier numéro par préfixe, comptage filtré).
"""
