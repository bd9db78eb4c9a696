"""
JobScope — Job Posting Classification Service
==============================================
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       Settings and the static NOC / NAICS / category tables
  domain/       Pure business objects (models, exceptions) — no I/O
  ports/        Abstract interfaces (Python Protocols)
  adapters/     Concrete implementations of each Port (jobs API, Postgres,
                bcrypt, JWT)
  services/     Classifier, metadata, ingestion, queries, scheduling, accounts
  interfaces/   Delivery layer: FastAPI, CLI, Streamlit UI
  tests/        Full test suite: unit / integration / e2e

Swapping an external dependency (jobs API, database):
  1. Write a new adapter in adapters/ implementing the relevant Port
  2. Change the single wiring line in services/container.py
  3. Done — zero other files touched
"""
__version__ = "1.0.0"
