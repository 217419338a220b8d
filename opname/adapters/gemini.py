"""
Gemini Advisory Backend.

Implements AdvisoryBackend with Google Gemini (google-generativeai).

Settings:
    OPNAME = {
        "ADVISORY_BACKEND": "opname.adapters.gemini.GeminiAdvisoryBackend",
        "GEMINI_API_KEY": "...",
        "GEMINI_MODEL": "gemini-2.5-flash",
    }
"""

import json
import logging

import google.generativeai as genai

from opname.conf import opname_settings
from opname.protocols.advisory import AdvisoryResult, AdvisorySnapshot

logger = logging.getLogger(__name__)


NOT_CONFIGURED_SUMMARY = (
    "API Key Google Gemini belum dikonfigurasi. Mohon tambahkan GEMINI_API_KEY "
    "pada pengaturan OPNAME untuk menggunakan fitur analisis."
)
NOT_CONFIGURED_RECOMMENDATIONS = ["Konfigurasi API Key", "Hubungi Administrator"]

PROMPT_TEMPLATE = """
Anda adalah asisten manajer gudang yang cerdas. Analisis data inventaris berikut ini
(Barang Habis Pakai) dan berikan wawasan.

Data Inventaris: {items}
Data Transaksi Terakhir: {transactions}

Tugas Anda:
1. Identifikasi barang yang stoknya kritis (di bawah stok minimum).
2. Berikan rekomendasi pengadaan (apa yang harus dibeli segera).
3. Analisis anomali jika ada (misalnya penggunaan berlebihan berdasarkan transaksi OUT, atau stok diam).

Jawab HANYA dengan JSON berbentuk:
{{"summary": "...", "recommendations": ["..."], "anomalies": ["..."]}}
"""


def _string_list(value) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(entry) for entry in value]


class GeminiAdvisoryBackend:
    """
    Advisory backend backed by a Gemini model.

    Missing API key → unavailable payload asking for configuration.
    Network, auth and parse errors propagate to the caller, which
    degrades them to AdvisoryResult.unavailable().
    """

    def __init__(self, api_key: str | None = None, model_name: str | None = None):
        self.api_key = api_key if api_key is not None else opname_settings.GEMINI_API_KEY
        self.model_name = model_name or opname_settings.GEMINI_MODEL

    def build_prompt(self, snapshot: AdvisorySnapshot) -> str:
        inventory = [
            {
                'name': item['name'],
                'stock': item['current_stock'],
                'min': item['min_stock'],
                'category': item['category'],
            }
            for item in snapshot.items
        ]
        return PROMPT_TEMPLATE.format(
            items=json.dumps(inventory, ensure_ascii=False),
            transactions=json.dumps(snapshot.transactions, ensure_ascii=False),
        )

    def analyze(self, snapshot: AdvisorySnapshot) -> AdvisoryResult:
        if not self.api_key:
            logger.warning("Gemini API key is not configured")
            return AdvisoryResult.unavailable(
                summary=NOT_CONFIGURED_SUMMARY,
                recommendations=NOT_CONFIGURED_RECOMMENDATIONS,
            )

        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(
            self.model_name,
            generation_config={"response_mime_type": "application/json"},
        )
        response = model.generate_content(self.build_prompt(snapshot))

        text = response.text
        if not text:
            raise ValueError("Empty response from Gemini")

        data = json.loads(text)
        if not isinstance(data, dict) or not data.get('summary'):
            raise ValueError("Gemini response has no summary")

        return AdvisoryResult(
            summary=str(data['summary']),
            recommendations=_string_list(data.get('recommendations')),
            anomalies=_string_list(data.get('anomalies')),
        )
