"""
Activity Logger

DESIGN DECISION: Every ledger mutation, rollback and import is logged as a
structured event. This gives:
1. A trail for debugging rollbacks and partial imports
2. One place that decides log level from event severity
3. Owner-tagged records so one user's activity can be filtered out

Logging must never break the main flow: the logger writes to structlog
only and holds no storage of its own.
"""

import logging
from typing import Optional

import structlog

from findash.activity.events import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)
from findash.config import AppSettings, get_settings


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """Route activity events to stderr at the configured level."""
    settings = settings or get_settings().app
    level = "DEBUG" if settings.debug_mode else settings.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))
    logging.getLogger("findash").setLevel(level)


class ActivityLogger:
    """
    Central activity logging service, optionally bound to one owner.

    Every ``log_*`` helper builds an ActivityEvent and passes it to ``log``.
    """

    def __init__(self, owner_id: Optional[str] = None):
        self._owner_id = owner_id
        self._logger = structlog.get_logger("findash.activity")

    @property
    def owner_id(self) -> Optional[str]:
        return self._owner_id

    def bind(self, owner_id: str) -> 'ActivityLogger':
        """A logger for the same sink tagged with ``owner_id``."""
        return ActivityLogger(owner_id=owner_id)

    def log(self, event: ActivityEvent) -> ActivityEvent:
        """Write the event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("activity_event", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("activity_event", **log_dict)
        else:
            self._logger.info("activity_event", **log_dict)

        return event

    # -- ledger ---------------------------------------------------------------

    def log_transaction_created(self, transaction_id: str, amount: str, kind: str) -> None:
        self.log(ActivityEventBuilder.transaction_created(
            owner_id=self._owner_id,
            transaction_id=transaction_id,
            amount=amount,
            kind=kind,
        ))

    def log_transaction_updated(self, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_updated(
            owner_id=self._owner_id,
            transaction_id=transaction_id,
        ))

    def log_transaction_deleted(self, transaction_id: str) -> None:
        self.log(ActivityEventBuilder.transaction_deleted(
            owner_id=self._owner_id,
            transaction_id=transaction_id,
        ))

    def log_delete_blocked(self, entity_type: str, entity_id: str) -> None:
        self.log(ActivityEventBuilder.delete_blocked(
            owner_id=self._owner_id,
            entity_type=entity_type,
            entity_id=entity_id,
        ))

    def log_budget_saved(self, category: str, amount: str) -> None:
        self.log(ActivityEventBuilder.budget_saved(
            owner_id=self._owner_id,
            category=category,
            amount=amount,
        ))

    def log_category_added(self, category_id: str, name: str, kind: str) -> None:
        self.log(ActivityEventBuilder.category_added(
            owner_id=self._owner_id,
            category_id=category_id,
            name=name,
            kind=kind,
        ))

    def log_category_deleted(self, category_id: str) -> None:
        self.log(ActivityEventBuilder.category_deleted(
            owner_id=self._owner_id,
            category_id=category_id,
        ))

    def log_categories_seeded(self, count: int) -> None:
        self.log(ActivityEventBuilder.categories_seeded(
            owner_id=self._owner_id,
            count=count,
        ))

    def log_mutation_rolled_back(
        self,
        operation: str,
        error_kind: str,
        error_message: str,
    ) -> None:
        self.log(ActivityEventBuilder.mutation_rolled_back(
            owner_id=self._owner_id,
            operation=operation,
            error_kind=error_kind,
            error_message=error_message,
        ))

    def log_validation_failed(self, entity_type: str, issues: list[dict]) -> None:
        self.log(ActivityEventBuilder.validation_failed(
            owner_id=self._owner_id,
            entity_type=entity_type,
            issues=issues,
        ))

    def log_store_error(self, operation: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.store_error(
            owner_id=self._owner_id,
            operation=operation,
            error_message=error_message,
        ))

    # -- imports --------------------------------------------------------------

    def log_import_started(self, candidate_count: int) -> None:
        self.log(ActivityEventBuilder.import_started(
            owner_id=self._owner_id,
            candidate_count=candidate_count,
        ))

    def log_import_candidate_failed(self, error_kind: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.import_candidate_failed(
            owner_id=self._owner_id,
            error_kind=error_kind,
            error_message=error_message,
        ))

    def log_import_completed(
        self,
        imported_count: int,
        skipped_count: int,
        failed_count: int,
    ) -> None:
        self.log(ActivityEventBuilder.import_completed(
            owner_id=self._owner_id,
            imported_count=imported_count,
            skipped_count=skipped_count,
            failed_count=failed_count,
        ))
