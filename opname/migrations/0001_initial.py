"""
Initial migration for Opname models.
"""

import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Opname models: Category, Item, OpnameSession, OpnameItem, Transaction."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nama')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Kategori',
                'verbose_name_plural': 'Kategori',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(help_text='Kode unik barang (mis. ATK-001)', max_length=50, unique=True, verbose_name='SKU')),
                ('name', models.CharField(max_length=200, verbose_name='Nama Barang')),
                ('category', models.CharField(blank=True, db_index=True, default='', help_text='Nama kategori (referensi berdasarkan nama)', max_length=100, verbose_name='Kategori')),
                ('location', models.CharField(blank=True, default='', max_length=100, verbose_name='Lokasi')),
                ('unit', models.CharField(default='Pcs', max_length=30, verbose_name='Satuan')),
                ('current_stock', models.IntegerField(default=0, help_text='Hanya berubah lewat transaksi atau stock opname', verbose_name='Stok Saat Ini')),
                ('min_stock', models.PositiveIntegerField(default=0, verbose_name='Stok Minimum')),
                ('initial_stock', models.PositiveIntegerField(default=0, help_text='Stok saat barang didaftarkan; titik awal replay ledger', verbose_name='Stok Awal')),
                ('last_updated', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Terakhir Diperbarui')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Barang',
                'verbose_name_plural': 'Barang',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='OpnameSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('label', models.CharField(help_text='Kode sesi berbasis tanggal (mis. SO-20240131)', max_length=50, verbose_name='Label')),
                ('date', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Tanggal')),
                ('status', models.CharField(choices=[('OPEN', 'Sedang Berjalan'), ('COMPLETED', 'Selesai')], db_index=True, default='OPEN', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Catatan')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Selesai pada')),
            ],
            options={
                'verbose_name': 'Sesi Stock Opname',
                'verbose_name_plural': 'Sesi Stock Opname',
                'ordering': ['-date', '-id'],
            },
        ),
        migrations.CreateModel(
            name='OpnameItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('system_stock', models.IntegerField(help_text='Snapshot saat sesi dibuat, tidak berubah', verbose_name='Stok Sistem')),
                ('physical_stock', models.IntegerField(blank=True, help_text='Kosong = belum dihitung', null=True, verbose_name='Stok Fisik')),
                ('difference', models.IntegerField(default=0, verbose_name='Selisih')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='opname_lines', to='opname.item', verbose_name='Barang')),
                ('session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='opname.opnamesession', verbose_name='Sesi')),
            ],
            options={
                'verbose_name': 'Item Opname',
                'verbose_name_plural': 'Item Opname',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('IN', 'Masuk'), ('OUT', 'Keluar'), ('ADJUSTMENT', 'Penyesuaian'), ('OPNAME_ADJUSTMENT', 'Penyesuaian Opname')], db_index=True, max_length=20, verbose_name='Tipe')),
                ('quantity', models.PositiveIntegerField(verbose_name='Jumlah')),
                ('date', models.DateField(db_index=True, default=django.utils.timezone.localdate, verbose_name='Tanggal')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Keterangan')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Dibuat')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='opname.item', verbose_name='Barang')),
                ('related_session', models.ForeignKey(blank=True, help_text='Diisi hanya untuk penyesuaian stock opname', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='adjustments', to='opname.opnamesession', verbose_name='Sesi Opname')),
            ],
            options={
                'verbose_name': 'Transaksi',
                'verbose_name_plural': 'Transaksi',
                'ordering': ['-created_at', '-id'],
            },
        ),
        # Constraints & indexes
        migrations.AddConstraint(
            model_name='category',
            constraint=models.UniqueConstraint(django.db.models.functions.text.Lower('name'), name='unique_category_name_ci'),
        ),
        migrations.AddConstraint(
            model_name='opnameitem',
            constraint=models.UniqueConstraint(fields=('session', 'item'), name='unique_opname_item_per_session'),
        ),
        migrations.AddIndex(
            model_name='transaction',
            index=models.Index(fields=['item', 'created_at'], name='opname_tx_item_created_idx'),
        ),
        migrations.AddIndex(
            model_name='transaction',
            index=models.Index(fields=['type', 'date'], name='opname_tx_type_date_idx'),
        ),
    ]
