"""
Exceptions for Opname.

All errors are StockError with a structured code for programmatic handling.
"""

from typing import Any


class StockError(Exception):
    """
    Structured exception for ledger and opname operations.

    Usage:
        try:
            stock.issue(item, 10)
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Hanya tersedia {e.available}")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'INVALID_QUANTITY': 'Jumlah barang harus bilangan bulat lebih dari 0',
        'INVALID_TYPE': 'Tipe transaksi tidak dikenal',
        'INVALID_COUNT': 'Hasil hitung fisik harus bilangan bulat tidak negatif',
        'INVALID_NAME': 'Nama tidak boleh kosong',
        'INSUFFICIENT_STOCK': 'Stok tidak mencukupi untuk transaksi keluar',
        'ITEM_NOT_FOUND': 'Barang tidak ditemukan',
        'ITEM_NOT_IN_SESSION': 'Barang tidak termasuk dalam sesi opname ini',
        'ITEM_IN_USE': 'Barang sudah memiliki riwayat transaksi atau stock opname',
        'DUPLICATE_SKU': 'SKU sudah digunakan barang lain',
        'STOCK_FIELD_READONLY': 'Stok hanya dapat diubah melalui transaksi atau stock opname',
        'CATEGORY_NOT_FOUND': 'Kategori tidak ditemukan',
        'CATEGORY_EXISTS': 'Kategori dengan nama tersebut sudah ada',
        'CATEGORY_IN_USE': 'Kategori masih digunakan oleh beberapa barang',
        'SESSION_NOT_FOUND': 'Sesi stock opname tidak ditemukan',
        'SESSION_CLOSED': 'Sesi stock opname sudah selesai',
    }

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    @property
    def available(self) -> int:
        """Shortcut for data['available']."""
        return self.data.get('available', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    @property
    def dependents(self) -> list[str]:
        """Shortcut for data['dependents'] (SKUs blocking a category delete)."""
        return self.data.get('dependents', [])

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: v if isinstance(v, (int, float, bool, list, dict, type(None))) else str(v)
                for k, v in self.data.items()
            }
        }
