# Overview: Transaction boundary for every mutating service operation.

from __future__ import annotations

from contextlib import contextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..errors import ConstraintViolation, NotFound, StorageError
from ..extensions import db


@contextmanager
def atomic(conflict_message: str | None = None):
    """
    Run a unit of work as one transaction.

    Commits when the block finishes; rolls back on any exception so a
    multi-row write (cascading delete, order + items) is never half-applied.
    Database failures are translated: IntegrityError -> ConstraintViolation,
    any other SQLAlchemyError -> StorageError. Nothing is retried.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise ConstraintViolation(conflict_message) from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StorageError() from exc
    except Exception:
        db.session.rollback()
        raise


def get_or_404(model, entity_id: str, label: str):
    obj = db.session.get(model, entity_id)
    if obj is None:
        raise NotFound(f"{label} not found")
    return obj
