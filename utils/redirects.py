"""
Модуль: `utils/redirects.py`.
Назначение: Проверка адреса возврата (`next`), чтобы не уводить пользователя на чужой сайт.
"""

from urllib.parse import urlsplit


def is_safe_next_url(target: str | None) -> bool:
    """Разрешены только относительные пути внутри приложения."""
    if not target:
        return False
    if target.startswith("//") or "\\" in target:
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc and target.startswith("/")
