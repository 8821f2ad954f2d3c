# Services package init
"""
Benefícios API: Services Layer
===============================

Service Inventory:
    - BeneficioService:    CRUD over the `beneficios` collection
    - validation_service:  ordered rule set for create/update bodies
"""
