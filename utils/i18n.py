"""
Модуль: `utils/i18n.py`.
Назначение: Вспомогательная логика выбора и нормализации языка интерфейса.
"""

from __future__ import annotations

from flask import Request


def is_supported_language(lang: str | None, supported_languages: tuple[str, ...]) -> bool:
    if not lang:
        return False
    return lang.strip().lower() in supported_languages


def normalize_language(lang: str | None, supported_languages: tuple[str, ...], default_language: str) -> str:
    """Приводит код языка к нижнему регистру или возвращает язык по умолчанию."""
    if not lang:
        return default_language
    normalized = lang.strip().lower()
    if normalized in supported_languages:
        return normalized
    return default_language


def resolve_request_language(
    request: Request,
    supported_languages: tuple[str, ...],
    cookie_name: str,
    default_language: str,
) -> str:
    """Язык запроса: сначала cookie, затем Accept-Language, затем язык по умолчанию."""
    default = normalize_language(default_language, supported_languages, supported_languages[0])

    cookie_lang = request.cookies.get(cookie_name)
    if is_supported_language(cookie_lang, supported_languages):
        return cookie_lang.strip().lower()

    preferred = request.accept_languages.best_match(supported_languages)
    if preferred:
        return preferred

    return default
