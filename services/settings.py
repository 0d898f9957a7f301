"""
Settings Service

Reads and writes the settings singleton row (id = 1).
"""

import logging

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import Settings
from constants import SETTINGS_ID, DEFAULT_SETTINGS
from schemas import SettingsSchema

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


class SettingsService:
    """Lazily initialized settings singleton on an explicitly passed session."""

    def __init__(self, session):
        self.session = session

    def _insert(self):
        """Dialect insert construct supporting ON CONFLICT, or None."""
        factory = _UPSERT_DIALECTS.get(self.session.get_bind().dialect.name)
        return factory(Settings.__table__) if factory else None

    def get(self):
        """
        Return the settings, creating the default row first if it is absent.

        Creation is an insert-if-absent, so two concurrent first reads both
        end up reading the same row. A primary-key conflict on databases
        without ON CONFLICT support is treated the same way.
        """
        row = self.session.get(Settings, SETTINGS_ID)
        if row is None:
            self._insert_defaults()
            row = self.session.get(Settings, SETTINGS_ID)
        return SettingsSchema.from_model(row)

    def set(self, settings):
        """Replace the whole settings row and echo the accepted value."""
        values = settings.to_columns()
        stmt = self._insert()
        try:
            if stmt is not None:
                stmt = stmt.values(id=SETTINGS_ID, **values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=['id'],
                    set_={column: stmt.excluded[column] for column in values},
                )
                self.session.execute(stmt)
            else:
                self.session.merge(Settings(id=SETTINGS_ID, **values))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        return settings

    def _insert_defaults(self):
        values = dict(DEFAULT_SETTINGS, id=SETTINGS_ID)
        stmt = self._insert()
        try:
            if stmt is not None:
                self.session.execute(stmt.values(**values).on_conflict_do_nothing(index_elements=['id']))
            else:
                self.session.add(Settings(**values))
            self.session.commit()
            logger.info("Default settings row ensured")
        except IntegrityError:
            # Another request created the row first
            self.session.rollback()
            logger.debug("Settings row already present, reading it")
        except SQLAlchemyError:
            self.session.rollback()
            raise
