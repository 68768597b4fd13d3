"""
Программа: «Personajes» – веб-приложение для просмотра персонажей Dragon Ball.
Модуль: models/catalog_import.py – журнал импорта каталога из внешнего API.

Запись с заполненным `completed_at` означает, что каталог загружен полностью.
Прерванный импорт оставляет запись без `completed_at`, и загрузка будет повторена.
"""

from datetime import datetime

from extensions import db


class CatalogImport(db.Model):
    """Класс `CatalogImport` описывает одну попытку импорта каталога."""
    id = db.Column(db.Integer, primary_key=True)
    started_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True, index=True)
    imported_count = db.Column(db.Integer, nullable=False, default=0)
