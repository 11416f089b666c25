"""
POS Store - App Configuration
=============================
Relational state of the till: catalog, loyalty members, orders,
points ledger and staff activity.
"""

from django.apps import AppConfig


class CoreStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.store"
    label = "core_store"
    verbose_name = "POS Store"
