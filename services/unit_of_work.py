"""
Модуль: `services/unit_of_work.py`.
Назначение: Явная граница транзакции «прочитать – изменить – записать».
"""

from contextlib import contextmanager

from extensions import db


@contextmanager
def unit_of_work():
    """Выполняет блок в одной транзакции: commit при успехе, rollback при любой ошибке."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
