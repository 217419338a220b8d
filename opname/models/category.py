"""
Category model — Grouping label for catalog items.
"""

from django.db import models
from django.db.models.functions import Lower
from django.utils.translation import gettext_lazy as _


class Category(models.Model):
    """
    Category of consumables (ATK, Pembersih, Pantry...).

    Items reference a category by NAME, not by foreign key.
    Renames cascade and deletes are guarded in services.catalog.
    """

    name = models.CharField(
        max_length=100,
        verbose_name=_('Nama'),
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Kategori')
        verbose_name_plural = _('Kategori')
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(Lower('name'), name='unique_category_name_ci'),
        ]

    def as_dict(self) -> dict:
        return {'id': self.pk, 'name': self.name}

    def __str__(self) -> str:
        return self.name
