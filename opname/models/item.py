"""
Item model — Catalog entry holding the system's belief of what is on hand.
"""

import logging

from django.db import models
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from opname.models.enums import StockStatus

logger = logging.getLogger('opname')


class ItemQuerySet(models.QuerySet):
    """QuerySet with helper filters for Item queries."""

    def low_stock(self):
        """Items at or below their minimum stock."""
        return self.filter(current_stock__lte=F('min_stock'))

    def out_of_stock(self):
        return self.filter(current_stock__lte=0)

    def in_category(self, name: str):
        return self.filter(category=name)


class Item(models.Model):
    """
    Consumable item in the catalog.

    current_stock is written ONLY by:
    - Transaction.save() for IN / OUT entries
    - Opname finalize (force-set to the physical count)

    Catalog edits never touch it. Use recalculate() to audit it against
    the ledger.
    """

    sku = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('SKU'),
        help_text=_('Kode unik barang (mis. ATK-001)'),
    )
    name = models.CharField(max_length=200, verbose_name=_('Nama Barang'))
    category = models.CharField(
        max_length=100,
        blank=True,
        default='',
        db_index=True,
        verbose_name=_('Kategori'),
        help_text=_('Nama kategori (referensi berdasarkan nama)'),
    )
    location = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Lokasi'))
    unit = models.CharField(max_length=30, default='Pcs', verbose_name=_('Satuan'))

    current_stock = models.IntegerField(
        default=0,
        verbose_name=_('Stok Saat Ini'),
        help_text=_('Hanya berubah lewat transaksi atau stock opname'),
    )
    min_stock = models.PositiveIntegerField(default=0, verbose_name=_('Stok Minimum'))
    initial_stock = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Stok Awal'),
        help_text=_('Stok saat barang didaftarkan; titik awal replay ledger'),
    )

    last_updated = models.DateTimeField(default=timezone.now, verbose_name=_('Terakhir Diperbarui'))
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Barang')
        verbose_name_plural = _('Barang')
        ordering = ['id']

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def stock_status(self) -> str:
        """OUT when nothing left, LOW at or below min_stock, else SAFE."""
        if self.current_stock <= 0:
            return StockStatus.OUT
        if self.current_stock <= self.min_stock:
            return StockStatus.LOW
        return StockStatus.SAFE

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_stock

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def replay_stock(self) -> int:
        """
        Stock obtained by replaying the ledger from initial_stock.

        IN adds, OUT subtracts, OPNAME_ADJUSTMENT force-sets to the
        counted value, ADJUSTMENT has no effect.
        """
        total = self.initial_stock
        for tx in self.transactions.order_by('created_at', 'id'):
            total = tx.apply_to(total)
        return total

    def recalculate(self) -> int:
        """
        Recalculate current_stock from the ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            New calculated stock
        """
        total = self.replay_stock()

        if total != self.current_stock:
            old = self.current_stock
            self.current_stock = total
            self.last_updated = timezone.now()
            self.save(update_fields=['current_stock', 'last_updated'])

            logger.warning(
                "Item %s recalculated: %s → %s (diff: %s)",
                self.sku, old, total, total - old,
            )

        return total

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'sku': self.sku,
            'name': self.name,
            'category': self.category,
            'location': self.location,
            'unit': self.unit,
            'current_stock': self.current_stock,
            'min_stock': self.min_stock,
            'last_updated': self.last_updated.isoformat() if self.last_updated else None,
        }

    def __str__(self) -> str:
        return f"{self.sku} {self.name}"
