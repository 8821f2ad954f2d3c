"""
Benefícios API: Application Package
====================================

REST API over the MongoDB `beneficios` collection (social-benefit records).

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (CRUD + validation)      │  ← one driver call per operation
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← document helpers + Pydantic
    ├─────────────────────────────────────┤
    │     Database (Motor client)         │  ← opened once at startup
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
