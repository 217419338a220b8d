"""
Enums for Opname models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class TransactionType(models.TextChoices):
    """
    Kind of ledger entry. Quantity is always a magnitude; the sign comes from here.

    IN:                 Goods received, adds to stock
    OUT:                Goods consumed, subtracts from stock
    ADJUSTMENT:         Manual note, no stock effect
    OPNAME_ADJUSTMENT:  Written by finalize; stock is force-set, not applied as delta
    """
    IN = 'IN', _('Masuk')
    OUT = 'OUT', _('Keluar')
    ADJUSTMENT = 'ADJUSTMENT', _('Penyesuaian')
    OPNAME_ADJUSTMENT = 'OPNAME_ADJUSTMENT', _('Penyesuaian Opname')


class SessionStatus(models.TextChoices):
    """Opname session lifecycle status."""
    OPEN = 'OPEN', _('Sedang Berjalan')      # Counting in progress
    COMPLETED = 'COMPLETED', _('Selesai')    # Finalized, terminal


class StockStatus(models.TextChoices):
    """Stock health of a catalog item."""
    SAFE = 'SAFE', _('Aman')
    LOW = 'LOW', _('Menipis')
    OUT = 'OUT', _('Habis')
