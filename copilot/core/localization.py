# copilot/core/localization.py
"""
Language support for agents.

The chat prompt is written with the language's English name, so codes picked
in the UI ("hi", "ta", ...) are resolved here before prompting.
"""

from typing import Dict, List, Optional

DEFAULT_LANGUAGE = "en"

# Supported languages
SUPPORTED_LANGUAGES: Dict[str, Dict[str, str]] = {
    "en": {"name": "English", "native_name": "English", "region": "Global"},
    "hi": {"name": "Hindi", "native_name": "हिन्दी", "region": "North India"},
    "bn": {"name": "Bengali", "native_name": "বাংলা", "region": "East India"},
    "pa": {"name": "Punjabi", "native_name": "ਪੰਜਾਬੀ", "region": "North India"},
    "gu": {"name": "Gujarati", "native_name": "ગુજરાતી", "region": "West India"},
    "mr": {"name": "Marathi", "native_name": "मराठी", "region": "West India"},
    "ta": {"name": "Tamil", "native_name": "தமிழ்", "region": "South India"},
    "te": {"name": "Telugu", "native_name": "తెలుగు", "region": "South India"},
    "kn": {"name": "Kannada", "native_name": "ಕನ್ನಡ", "region": "South India"},
    "ml": {"name": "Malayalam", "native_name": "മലയാളം", "region": "South India"},
    "or": {"name": "Odia", "native_name": "ଓଡ଼ିଆ", "region": "East India"},
    "ur": {"name": "Urdu", "native_name": "اردو", "region": "North India"},
    "es": {"name": "Spanish", "native_name": "Español", "region": "Global"},
    "fr": {"name": "French", "native_name": "Français", "region": "Global"},
    "ar": {"name": "Arabic", "native_name": "العربية", "region": "Global"},
}


def is_supported_language(code: str) -> bool:
    return code in SUPPORTED_LANGUAGES


def language_name(code: Optional[str]) -> str:
    """English name for a language code; unknown values are passed through as-is."""
    if not code:
        return SUPPORTED_LANGUAGES[DEFAULT_LANGUAGE]["name"]
    info = SUPPORTED_LANGUAGES.get(code.lower())
    return info["name"] if info else code


def search_languages(query: str = "") -> List[Dict[str, str]]:
    """Filter by name, native name or region, case-insensitively."""
    q = query.strip().lower()
    results = []
    for code, info in SUPPORTED_LANGUAGES.items():
        if not q or any(q in info[field].lower() for field in ("name", "native_name", "region")):
            results.append({"code": code, **info})
    return results


def group_by_region(languages: List[Dict[str, str]]) -> Dict[str, List[Dict[str, str]]]:
    grouped: Dict[str, List[Dict[str, str]]] = {}
    for lang in languages:
        grouped.setdefault(lang["region"], []).append(lang)
    return grouped
