"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: services/catalog.py – импорт каталога персонажей из внешнего API.

Назначение модуля:
- Постраничная загрузка персонажей (`items` + `links.next`) из dragonball-api.com.
- Сохранение каждого персонажа сразу после разбора (upsert по идентификатору).
- Учёт завершённых импортов: прерванная загрузка будет повторена при следующем чтении.
"""

from datetime import datetime

import requests
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models.catalog_import import CatalogImport
from models.character import Character
from services.errors import CatalogUnavailableError
from services.unit_of_work import unit_of_work

# Диапазон INTEGER в SQLite и BIGINT в остальных СУБД
_MIN_ID = -(2 ** 63)
_MAX_ID = 2 ** 63 - 1

_TEXT_FIELDS = {
    "name": "name",
    "ki": "ki",
    "max_ki": "maxKi",
    "race": "race",
    "gender": "gender",
    "description": "description",
    "image": "image",
    "affiliation": "affiliation",
    "deleted_at": "deletedAt",
}


class MalformedPayloadError(ValueError):
    """Ответ внешнего API не соответствует ожидаемой структуре."""


def _text(item: dict, key: str) -> str | None:
    value = item.get(key)
    if value is not None and not isinstance(value, str):
        raise MalformedPayloadError(f"Поле {key!r} должно быть строкой, получено {type(value).__name__}")
    return value


def character_from_item(item) -> Character:
    """Строит персонажа из элемента `items`; `id` приводится к целому числу."""
    if not isinstance(item, dict):
        raise MalformedPayloadError("Элемент каталога должен быть объектом")
    if "id" not in item:
        raise MalformedPayloadError("У элемента каталога нет поля 'id'")
    try:
        character_id = int(item["id"])
    except (TypeError, ValueError, OverflowError) as exc:
        raise MalformedPayloadError(f"Некорректный id: {item['id']!r}") from exc
    if not _MIN_ID <= character_id <= _MAX_ID:
        raise MalformedPayloadError(f"id вне допустимого диапазона: {character_id}")

    fields = {attr: _text(item, key) for attr, key in _TEXT_FIELDS.items()}
    character = Character(id=character_id, **fields)

    transformations = item.get("transformations")
    if isinstance(transformations, list):
        character.transformations = [
            t.get("name") for t in transformations if isinstance(t, dict) and t.get("name")
        ]
    return character


def parse_page(payload) -> tuple[list, str | None]:
    """Возвращает элементы страницы и адрес следующей страницы (None, если страниц больше нет)."""
    if not isinstance(payload, dict):
        raise MalformedPayloadError("Ответ API должен быть объектом")

    items = payload.get("items") or []
    if not isinstance(items, list):
        raise MalformedPayloadError("Поле 'items' должно быть списком")

    links = payload.get("links") or {}
    if not isinstance(links, dict):
        raise MalformedPayloadError("Поле 'links' должно быть объектом")

    next_url = links.get("next")
    if next_url is not None and not isinstance(next_url, str):
        raise MalformedPayloadError("Поле 'links.next' должно быть строкой")
    return items, (next_url or None)


def _fetch_page(http: requests.Session, url: str, params: dict | None) -> dict:
    response = http.get(url, params=params, timeout=current_app.config["CATALOG_API_TIMEOUT"])
    response.raise_for_status()
    return response.json()


def catalog_is_complete() -> bool:
    """Был ли хотя бы один импорт каталога доведён до конца."""
    return (
        CatalogImport.query.filter(CatalogImport.completed_at.isnot(None)).first()
        is not None
    )


def needs_bootstrap() -> bool:
    """Каталог нужно загрузить, если он пуст или ни один импорт не завершился."""
    return not catalog_is_complete() or Character.query.first() is None


def _open_import() -> CatalogImport:
    """Последняя незавершённая запись журнала (перезапускается) или новая."""
    record = (
        CatalogImport.query.filter(CatalogImport.completed_at.is_(None))
        .order_by(CatalogImport.id.desc())
        .first()
    )
    with unit_of_work() as session:
        if record is None:
            record = CatalogImport()
            session.add(record)
        else:
            record.started_at = datetime.utcnow()
            record.imported_count = 0
    return record


def bootstrap_catalog() -> int:
    """Загружает весь каталог из внешнего API и возвращает число импортированных персонажей.

    Каждый персонаж сохраняется отдельной транзакцией. При сетевой ошибке или
    некорректном ответе импорт прерывается с `CatalogUnavailableError`; уже
    сохранённые персонажи остаются, а журнал импорта остаётся незавершённым.
    """
    cfg = current_app.config
    record = _open_import()

    url = cfg["CATALOG_API_URL"]
    params = {"limit": cfg["CATALOG_PAGE_SIZE"]}
    imported = 0
    current_app.logger.info("Импорт каталога #%s: начало загрузки с %s", record.id, url)

    try:
        with requests.Session() as http:
            while url:
                items, next_url = parse_page(_fetch_page(http, url, params))
                for item in items:
                    character = character_from_item(item)
                    with unit_of_work() as session:
                        merged = session.merge(character)
                        record.imported_count = imported + 1
                    merged.transformations = character.transformations
                    imported += 1

                current_app.logger.debug("Импорт каталога #%s: страница %s, элементов %d", record.id, url, len(items))
                # Ссылка `next` уже содержит параметры пагинации
                url = next_url
                params = None
    except (requests.RequestException, ValueError, SQLAlchemyError) as exc:
        current_app.logger.exception(
            "Импорт каталога #%s прерван после %d персонажей", record.id, imported
        )
        raise CatalogUnavailableError() from exc

    with unit_of_work():
        record.completed_at = datetime.utcnow()
        record.imported_count = imported

    current_app.logger.info("Импорт каталога #%s завершён: %d персонажей", record.id, imported)
    return imported


def ensure_catalog() -> bool:
    """Запускает импорт, если он нужен. Возвращает True, если импорт выполнялся."""
    if not needs_bootstrap():
        return False
    bootstrap_catalog()
    return True
