"""Arabic / English dictionaries and locale-aware formatting helpers."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

Locale = Literal["ar", "en"]

LOCALES: tuple[str, ...] = ("ar", "en")

_AR_DIGITS = str.maketrans("0123456789", "٠١٢٣٤٥٦٧٨٩")

_MONTHS = {
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
    "ar": ["يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
           "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر"],
}

DICTIONARIES: dict[str, dict[str, Any]] = {
    "en": {
        "direction": "ltr",
        "auth": {
            "loading": "Loading...",
            "signingIn": "Signing you in...",
            "backToSite": "Back to Itqan",
            "login": {"title": "Sign in to Itqan", "submit": "Sign in"},
            "signup": {"title": "Create your Itqan account", "submit": "Create account"},
            "completeProfile": {
                "title": "Complete your profile",
                "submit": "Save and continue",
            },
            "fields": {
                "first_name": "First name",
                "last_name": "Last name",
                "job_title": "Job title",
                "phone_number": "Phone number",
                "email": "Email",
                "password": "Password",
                "business_model": "Business model",
                "team_size": "Team size",
                "about_yourself": "About yourself",
            },
            "validation": {
                "required": "{field} is required",
                "invalidEmail": "Please enter a valid email address",
                "passwordTooShort": "Password must be at least 8 characters",
                "invalidPhone": "Please enter a valid phone number",
                "invalidTeamSize": "Please choose a team size",
                "loginFailed": "Login failed. Please check your credentials.",
                "signupFailed": "Signup failed. Please try again.",
                "profileFailed": "Could not save your profile. Please try again.",
                "networkError": "Network error. Please try again.",
            },
        },
        "dashboard": {
            "title": "Dashboard",
            "welcome": "Welcome, {name}",
            "results": "results",
            "noResults": "No assets found",
            "noResultsHint": "Try adjusting your search terms or filters",
            "loading": "Loading assets...",
            "filters": "Filters",
            "clearAll": "Clear all",
            "categories": "Categories",
            "formats": "Formats",
            "languages": "Languages",
            "licenses": "Licenses",
            "search": "Search assets...",
            "assets": {"title": "Assets"},
            "showing": "Showing {start} to {end} of {total} results",
            "previous": "Previous",
            "next": "Next",
            "download": "Download",
            "requestAccess": "Request access",
            "viewDetails": "View details",
        },
        "categories": {"quran": "Quran", "hadith": "Hadith", "tafsir": "Tafsir", "fiqh": "Fiqh"},
        "formats": {"json": "JSON", "xml": "XML", "csv": "CSV", "audio": "Audio"},
        "languages": {"ar": "Arabic", "en": "English", "ur": "Urdu"},
        "licenses": {"cc0": "CC0", "cc-by": "CC BY", "cc-by-sa": "CC BY-SA"},
    },
    "ar": {
        "direction": "rtl",
        "auth": {
            "loading": "جاري التحميل...",
            "signingIn": "جاري تسجيل الدخول...",
            "backToSite": "العودة لموقع إتقان",
            "login": {"title": "تسجيل الدخول إلى إتقان", "submit": "تسجيل الدخول"},
            "signup": {"title": "إنشاء حساب في إتقان", "submit": "إنشاء الحساب"},
            "completeProfile": {
                "title": "أكمل ملفك الشخصي",
                "submit": "حفظ ومتابعة",
            },
            "fields": {
                "first_name": "الاسم الأول",
                "last_name": "اسم العائلة",
                "job_title": "المسمى الوظيفي",
                "phone_number": "رقم الهاتف",
                "email": "البريد الإلكتروني",
                "password": "كلمة المرور",
                "business_model": "نموذج العمل",
                "team_size": "حجم الفريق",
                "about_yourself": "نبذة عنك",
            },
            "validation": {
                "required": "{field} مطلوب",
                "invalidEmail": "يرجى إدخال بريد إلكتروني صحيح",
                "passwordTooShort": "يجب أن تتكون كلمة المرور من 8 أحرف على الأقل",
                "invalidPhone": "يرجى إدخال رقم هاتف صحيح",
                "invalidTeamSize": "يرجى اختيار حجم الفريق",
                "loginFailed": "فشل تسجيل الدخول. يرجى التحقق من بياناتك.",
                "signupFailed": "فشل إنشاء الحساب. يرجى المحاولة مرة أخرى.",
                "profileFailed": "تعذر حفظ ملفك الشخصي. يرجى المحاولة مرة أخرى.",
                "networkError": "خطأ في الشبكة. يرجى المحاولة مرة أخرى.",
            },
        },
        "dashboard": {
            "title": "لوحة التحكم",
            "welcome": "أهلاً وسهلاً، {name}",
            "results": "نتيجة",
            "noResults": "لم يتم العثور على أصول",
            "noResultsHint": "جرب تغيير مصطلحات البحث أو المرشحات",
            "loading": "جاري تحميل الأصول...",
            "filters": "المرشحات",
            "clearAll": "مسح الكل",
            "categories": "الفئات",
            "formats": "الصيغ",
            "languages": "اللغات",
            "licenses": "التراخيص",
            "search": "ابحث في الأصول...",
            "assets": {"title": "الأصول"},
            "showing": "عرض {start} إلى {end} من {total} نتيجة",
            "previous": "السابق",
            "next": "التالي",
            "download": "تحميل",
            "requestAccess": "طلب الوصول",
            "viewDetails": "عرض التفاصيل",
        },
        "categories": {"quran": "القرآن", "hadith": "الحديث", "tafsir": "التفسير", "fiqh": "الفقه"},
        "formats": {"json": "JSON", "xml": "XML", "csv": "CSV", "audio": "صوت"},
        "languages": {"ar": "العربية", "en": "الإنجليزية", "ur": "الأردية"},
        "licenses": {"cc0": "CC0", "cc-by": "CC BY", "cc-by-sa": "CC BY-SA"},
    },
}


def is_supported(locale: str) -> bool:
    return locale in LOCALES


def get_dictionary(locale: str) -> dict[str, Any]:
    """Return the dictionary for *locale*, falling back to English."""
    return DICTIONARIES.get(locale, DICTIONARIES["en"])


def t(locale: str, path: str, **params: Any) -> str:
    """Look up a dotted *path* (``"dashboard.welcome"``) and format it with *params*."""
    node: Any = get_dictionary(locale)
    for part in path.split("."):
        if not isinstance(node, dict) or part not in node:
            return path
        node = node[part]
    if not isinstance(node, str):
        return path
    return node.format(**params) if params else node


def format_number(value: int | float, locale: str) -> str:
    """Group thousands; Arabic output uses Arabic-Indic digits and separators."""
    text = f"{value:,}"
    if locale == "ar":
        return text.replace(",", "٬").replace(".", "٫").translate(_AR_DIGITS)
    return text


def format_date(value: datetime, locale: str) -> str:
    """Short date (``Jan 15, 2024`` / ``١٥ يناير ٢٠٢٤``)."""
    month = _MONTHS.get(locale, _MONTHS["en"])[value.month - 1]
    if locale == "ar":
        return f"{value.day} {month} {value.year}".translate(_AR_DIGITS)
    return f"{month} {value.day}, {value.year}"
