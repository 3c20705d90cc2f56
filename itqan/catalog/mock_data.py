"""Static catalog used until the backend exposes a real asset listing."""

from __future__ import annotations

from datetime import datetime, timezone

from itqan.schemas.asset import AssetOut

_CC0 = {
    "type": "cc0",
    "name": "CC0 - Public Domain",
    "url": "https://creativecommons.org/publicdomain/zero/1.0/",
}
_CC_BY = {
    "type": "cc-by",
    "name": "CC BY - Attribution",
    "url": "https://creativecommons.org/licenses/by/4.0/",
}
_CC_BY_SA = {
    "type": "cc-by-sa",
    "name": "CC BY-SA - Attribution-ShareAlike",
    "url": "https://creativecommons.org/licenses/by-sa/4.0/",
}

_QURAN_FOUNDATION = {"id": "pub-1", "name": "Quran Foundation", "verified": True}
_HERITAGE = {"id": "pub-2", "name": "Islamic Heritage Foundation", "verified": True}
_TAFSIR_CENTER = {"id": "pub-3", "name": "Tafsir Research Center", "verified": False}
_RECITERS = {"id": "pub-4", "name": "Recitation Archive", "verified": True}


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


MOCK_ASSETS: tuple[AssetOut, ...] = tuple(
    AssetOut.model_validate(a)
    for a in (
        {
            "id": "asset-1",
            "title": "Complete Quran Text - Uthmani Script",
            "description": "Full Quranic text in Uthmani script with verse indexing and metadata for developers",
            "publisher": _QURAN_FOUNDATION,
            "category": "quran",
            "tags": ["quran", "uthmani", "arabic", "text"],
            "format": "json",
            "language": "ar",
            "license": _CC0,
            "stats": {"downloads": 1250, "size_mb": 2.5, "version": "1.0.0"},
            "created_at": _ts("2024-01-15T10:30:00"),
            "updated_at": _ts("2024-01-20T14:20:00"),
        },
        {
            "id": "asset-2",
            "title": "Sahih Bukhari Hadith Collection",
            "description": "Complete collection of authentic hadiths from Sahih Bukhari with Arabic text and English translations",
            "publisher": _HERITAGE,
            "category": "hadith",
            "tags": ["hadith", "bukhari", "arabic", "english"],
            "format": "xml",
            "language": "ar",
            "license": _CC_BY,
            "stats": {"downloads": 890, "size_mb": 15.2, "version": "2.1.0"},
            "created_at": _ts("2024-01-10T08:00:00"),
            "updated_at": _ts("2024-01-22T16:45:00"),
        },
        {
            "id": "asset-3",
            "title": "Quran English Translation - Sahih International",
            "description": "Verse-aligned English translation of the Quran suitable for search and display",
            "publisher": _QURAN_FOUNDATION,
            "category": "quran",
            "tags": ["quran", "translation", "english"],
            "format": "csv",
            "language": "en",
            "license": _CC_BY,
            "stats": {"downloads": 2310, "size_mb": 1.8, "version": "1.2.0"},
            "created_at": _ts("2024-02-02T09:15:00"),
            "updated_at": _ts("2024-02-10T11:00:00"),
        },
        {
            "id": "asset-4",
            "title": "Tafsir Ibn Kathir",
            "description": "Classical exegesis of the Quran by Ibn Kathir, indexed by surah and ayah",
            "publisher": _TAFSIR_CENTER,
            "category": "tafsir",
            "tags": ["tafsir", "ibn kathir", "arabic"],
            "format": "json",
            "language": "ar",
            "license": _CC_BY_SA,
            "stats": {"downloads": 640, "size_mb": 48.0, "version": "1.0.3"},
            "created_at": _ts("2024-02-18T13:40:00"),
            "updated_at": _ts("2024-03-01T08:25:00"),
        },
        {
            "id": "asset-5",
            "title": "Murattal Recitation - Full Mushaf",
            "description": "Verse-by-verse audio recitation of the complete Quran with timing metadata",
            "publisher": _RECITERS,
            "category": "quran",
            "tags": ["quran", "audio", "recitation"],
            "format": "audio",
            "language": "ar",
            "license": _CC_BY_SA,
            "stats": {"downloads": 3120, "size_mb": 912.4, "version": "3.0.0"},
            "created_at": _ts("2024-03-05T07:00:00"),
            "updated_at": _ts("2024-03-12T19:30:00"),
            "access_required": True,
            "has_access": False,
        },
        {
            "id": "asset-6",
            "title": "Riyad as-Salihin - Urdu Translation",
            "description": "Hadith compilation by Imam an-Nawawi with Urdu translation and grading",
            "publisher": _HERITAGE,
            "category": "hadith",
            "tags": ["hadith", "nawawi", "urdu"],
            "format": "json",
            "language": "ur",
            "license": _CC_BY,
            "stats": {"downloads": 410, "size_mb": 0.6, "version": "1.0.0"},
            "created_at": _ts("2024-03-20T10:10:00"),
            "updated_at": _ts("2024-03-21T10:10:00"),
        },
        {
            "id": "asset-7",
            "title": "Principles of Fiqh - Comparative Rulings",
            "description": "Structured dataset of fiqh rulings across the four schools with sources",
            "publisher": _TAFSIR_CENTER,
            "category": "fiqh",
            "tags": ["fiqh", "madhhab", "english"],
            "format": "csv",
            "language": "en",
            "license": _CC0,
            "stats": {"downloads": 175, "size_mb": 3.4, "version": "0.9.0"},
            "created_at": _ts("2024-04-01T12:00:00"),
            "updated_at": _ts("2024-04-03T15:45:00"),
            "access_required": True,
            "has_access": True,
        },
        {
            "id": "asset-8",
            "title": "Quran Word-by-Word Morphology",
            "description": "Morphological annotation of every Quranic word: root, lemma and part of speech",
            "publisher": _QURAN_FOUNDATION,
            "category": "quran",
            "tags": ["quran", "morphology", "linguistics"],
            "format": "xml",
            "language": "ar",
            "license": _CC_BY_SA,
            "stats": {"downloads": 980, "size_mb": 22.7, "version": "2.0.1"},
            "created_at": _ts("2024-04-14T09:00:00"),
            "updated_at": _ts("2024-04-20T09:30:00"),
        },
    )
)

# Facet option values in display order
FACET_VALUES: dict[str, tuple[str, ...]] = {
    "categories": ("quran", "hadith", "tafsir", "fiqh"),
    "formats": ("json", "xml", "csv", "audio"),
    "languages": ("ar", "en", "ur"),
    "licenses": ("cc0", "cc-by", "cc-by-sa"),
}
