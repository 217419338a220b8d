"""
OpnameSession / OpnameItem models — Physical count reconciliation.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from opname.models.enums import SessionStatus


class OpnameSession(models.Model):
    """
    A physical count of the whole catalog.

    LIFECYCLE:

        ┌──────┐   finalize()   ┌───────────┐
        │ OPEN │ ─────────────► │ COMPLETED │
        └──────┘                └───────────┘

    - Created OPEN with one OpnameItem per catalog item (frozen snapshot)
    - Counts are recorded while OPEN, catalog stock is not touched
    - finalize() writes OPNAME_ADJUSTMENT entries and force-sets stock
    - COMPLETED is terminal: no counts, no second finalize
    """

    label = models.CharField(
        max_length=50,
        verbose_name=_('Label'),
        help_text=_('Kode sesi berbasis tanggal (mis. SO-20240131)'),
    )
    date = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Tanggal'))
    status = models.CharField(
        max_length=20,
        choices=SessionStatus.choices,
        default=SessionStatus.OPEN,
        db_index=True,
        verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Catatan'))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Selesai pada'))

    class Meta:
        verbose_name = _('Sesi Stock Opname')
        verbose_name_plural = _('Sesi Stock Opname')
        ordering = ['-date', '-id']

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.OPEN

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'label': self.label,
            'date': self.date.isoformat() if self.date else None,
            'status': self.status,
            'notes': self.notes,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'items': [line.as_dict() for line in self.items.all()],
        }

    def __str__(self) -> str:
        return f"{self.label} ({self.status})"


class OpnameItemQuerySet(models.QuerySet):

    def counted(self):
        return self.filter(physical_stock__isnull=False)

    def uncounted(self):
        return self.filter(physical_stock__isnull=True)

    def discrepancies(self):
        """Counted lines whose physical count differs from the snapshot."""
        return self.counted().exclude(difference=0)


class OpnameItem(models.Model):
    """
    One catalog item inside a session.

    Invariant:
        difference = physical_stock - system_stock   when counted
        difference = 0                               when physical_stock is None
    """

    session = models.ForeignKey(
        OpnameSession,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Sesi'),
    )
    item = models.ForeignKey(
        'opname.Item',
        on_delete=models.PROTECT,
        related_name='opname_lines',
        verbose_name=_('Barang'),
    )
    system_stock = models.IntegerField(
        verbose_name=_('Stok Sistem'),
        help_text=_('Snapshot saat sesi dibuat, tidak berubah'),
    )
    physical_stock = models.IntegerField(
        null=True,
        blank=True,
        verbose_name=_('Stok Fisik'),
        help_text=_('Kosong = belum dihitung'),
    )
    difference = models.IntegerField(default=0, verbose_name=_('Selisih'))

    objects = OpnameItemQuerySet.as_manager()

    class Meta:
        verbose_name = _('Item Opname')
        verbose_name_plural = _('Item Opname')
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['session', 'item'], name='unique_opname_item_per_session'),
        ]

    @property
    def is_counted(self) -> bool:
        return self.physical_stock is not None

    @property
    def has_discrepancy(self) -> bool:
        return self.is_counted and self.difference != 0

    def set_count(self, physical_stock: int | None) -> None:
        """Apply a count (None = uncounted) keeping difference consistent."""
        self.physical_stock = physical_stock
        if physical_stock is None:
            self.difference = 0
        else:
            self.difference = physical_stock - self.system_stock

    def as_dict(self) -> dict:
        return {
            'item_id': self.item_id,
            'system_stock': self.system_stock,
            'physical_stock': self.physical_stock,
            'difference': self.difference,
        }

    def __str__(self) -> str:
        counted = '?' if self.physical_stock is None else self.physical_stock
        return f"{self.item_id}: {self.system_stock} → {counted}"
