"""Domain layer for budgetseries application.

Services are imported from their modules (``budgetseries.domain.income`` and
so on) rather than re-exported here, because the database layer imports
``budgetseries.domain.entities`` and must not pull the services in with it.
"""
