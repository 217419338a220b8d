"""
Transaction model — Immutable ledger of stock-affecting events.
"""

from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from opname.models.enums import TransactionType


class TransactionQuerySet(models.QuerySet):

    def for_item(self, item):
        return self.filter(item=item)

    def of_type(self, tx_type):
        return self.filter(type=tx_type)

    def between(self, start=None, end=None):
        qs = self
        if start is not None:
            qs = qs.filter(date__gte=start)
        if end is not None:
            qs = qs.filter(date__lte=end)
        return qs


class Transaction(models.Model):
    """
    Immutable record of a stock-affecting event.

    Rules:
    - NEVER update() or delete()
    - quantity is a magnitude; the direction comes from type
    - IN / OUT update Item.current_stock atomically on save()
    - ADJUSTMENT and OPNAME_ADJUSTMENT leave stock alone on save();
      finalize force-sets stock for opname adjustments
    """

    item = models.ForeignKey(
        'opname.Item',
        on_delete=models.PROTECT,
        related_name='transactions',
        verbose_name=_('Barang'),
    )
    type = models.CharField(
        max_length=20,
        choices=TransactionType.choices,
        db_index=True,
        verbose_name=_('Tipe'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Jumlah'))
    date = models.DateField(default=timezone.localdate, db_index=True, verbose_name=_('Tanggal'))
    notes = models.TextField(blank=True, default='', verbose_name=_('Keterangan'))

    related_session = models.ForeignKey(
        'opname.OpnameSession',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='adjustments',
        verbose_name=_('Sesi Opname'),
        help_text=_('Diisi hanya untuk penyesuaian stock opname'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Dibuat'))

    objects = TransactionQuerySet.as_manager()

    class Meta:
        verbose_name = _('Transaksi')
        verbose_name_plural = _('Transaksi')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['item', 'created_at'], name='opname_tx_item_created_idx'),
            models.Index(fields=['type', 'date'], name='opname_tx_type_date_idx'),
        ]

    @property
    def signed_delta(self) -> int:
        """Effect on stock when applied as a delta (0 for adjustment kinds)."""
        if self.type == TransactionType.IN:
            return self.quantity
        if self.type == TransactionType.OUT:
            return -self.quantity
        return 0

    def apply_to(self, stock: int) -> int:
        """Replay this entry on top of a running stock value."""
        if self.type == TransactionType.OPNAME_ADJUSTMENT:
            physical = self.metadata.get('physical_stock')
            return stock if physical is None else physical
        return stock + self.signed_delta

    def save(self, *args, **kwargs):
        """Save transaction and update item stock atomically."""
        if self.pk:
            raise ValueError(
                "Transaksi tidak dapat diubah. "
                "Untuk koreksi, catat transaksi baru."
            )

        if not self.quantity or self.quantity <= 0:
            raise ValueError("Jumlah transaksi harus lebih dari 0")

        with transaction.atomic():
            super().save(*args, **kwargs)

            delta = self.signed_delta
            if delta:
                # Import here to avoid circular import
                from opname.models.item import Item

                Item.objects.filter(pk=self.item_id).update(
                    current_stock=F('current_stock') + delta,
                    last_updated=timezone.now(),
                )

    def delete(self, *args, **kwargs):
        """Prevent deletion — transactions are immutable."""
        raise ValueError(
            "Transaksi tidak dapat dihapus. "
            "Untuk membatalkan, catat transaksi kebalikannya."
        )

    def as_dict(self) -> dict:
        data = {
            'id': self.pk,
            'item_id': self.item_id,
            'type': self.type,
            'quantity': self.quantity,
            'date': self.date.isoformat() if self.date else None,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
        if self.related_session_id:
            data['related_session_id'] = self.related_session_id
        return data

    def __str__(self) -> str:
        sign = {TransactionType.IN: '+', TransactionType.OUT: '-'}.get(self.type, '')
        return f"{self.type} {sign}{self.quantity} | {self.item_id}"
