"""Django app configuration for Opname."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class OpnameConfig(AppConfig):
    """Configuration for Opname app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "opname"
    verbose_name = _("Stok & Stock Opname")
