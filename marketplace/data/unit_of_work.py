# marketplace/data/unit_of_work.py
from sqlalchemy.orm import Session

from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


class UnitOfWork:
    """
    Atomowa jednostka pracy na sesji SQLAlchemy.

    Wszystkie zapisy wewnątrz bloku `with` trafiają do jednej transakcji:
    wyjście bez wyjątku -> commit, wyjątek -> rollback i wyjątek leci dalej.
    Repozytoria w środku robią tylko flush, nigdy commit.
    """

    def __init__(self, db: Session):
        self.db = db
        self.committed = False

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            logger.info(f"Rolling back unit of work: {exc_type.__name__}")
            self.db.rollback()
            return False

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.committed = True
        return False
