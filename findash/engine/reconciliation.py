"""
Reconciliation Engine

Merges a batch of externally sourced candidate transactions into an
owner's ledger while suppressing likely duplicates.

MATCHING RULE: a candidate duplicates an existing transaction when both have
the same date, the same kind, and amounts closer than the tolerance (one
cent by default). Descriptions are ignored because external sources reformat
them ("UBER *TRIP" vs "Uber trip"), and comparing them would let obvious
duplicates through.

Matching always runs against the ledger as it was before the run started.
Candidates imported earlier in the same run do not suppress later ones, so a
batch that repeats itself imports every copy.

Inserts happen one at a time, in input order. A failed insert is recorded
and the run moves on; inserts that already succeeded stay committed.
"""

from decimal import Decimal
from typing import Awaitable, Callable, Iterable, Optional, Sequence

from findash.activity import ActivityLogger
from findash.errors import FinDashError
from findash.models.ledger import Transaction, TransactionFields
from findash.models.reports import (
    CandidateClassification,
    ImportFailure,
    ReconciliationResult,
)


DEFAULT_TOLERANCE = Decimal("0.01")

InsertFn = Callable[[TransactionFields], Awaitable[Transaction]]


def is_duplicate(
    existing: Transaction,
    candidate: TransactionFields,
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> bool:
    return (
        existing.date == candidate.date
        and existing.kind == candidate.kind
        and abs(existing.amount - candidate.amount) < tolerance
    )


def find_match(
    existing: Iterable[Transaction],
    candidate: TransactionFields,
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> Optional[Transaction]:
    for transaction in existing:
        if is_duplicate(transaction, candidate, tolerance):
            return transaction
    return None


def classify_candidates(
    existing: Sequence[Transaction],
    candidates: Iterable[TransactionFields],
    tolerance: Decimal = DEFAULT_TOLERANCE,
) -> list[CandidateClassification]:
    """Label each candidate duplicate or new, without touching any store."""
    classified = []
    for candidate in candidates:
        match = find_match(existing, candidate, tolerance)
        classified.append(CandidateClassification(
            candidate=candidate,
            is_duplicate=match is not None,
            matched_transaction_id=match.id if match else None,
        ))
    return classified


async def reconcile(
    existing: Sequence[Transaction],
    candidates: Sequence[TransactionFields],
    insert: InsertFn,
    tolerance: Decimal = DEFAULT_TOLERANCE,
    activity_logger: Optional[ActivityLogger] = None,
) -> ReconciliationResult:
    """
    Import the candidates that are not already in ``existing``.

    Args:
        existing: The ledger before the run
        candidates: Candidate transactions, processed in order
        insert: Awaitable that persists one candidate and returns the
                stored transaction
        tolerance: Largest amount difference still treated as different
        activity_logger: Optional logger for per-run activity events

    Returns:
        ReconciliationResult with imported, skipped and failed candidates
    """
    baseline = tuple(existing)
    imported: list[Transaction] = []
    skipped: list[TransactionFields] = []
    failed: list[ImportFailure] = []

    if activity_logger:
        activity_logger.log_import_started(candidate_count=len(candidates))

    for classification in classify_candidates(baseline, candidates, tolerance):
        candidate = classification.candidate
        if classification.is_duplicate:
            skipped.append(candidate)
            continue

        try:
            imported.append(await insert(candidate))
        except FinDashError as e:
            failed.append(ImportFailure(
                candidate=candidate,
                error_kind=e.kind,
                message=str(e),
            ))
            if activity_logger:
                activity_logger.log_import_candidate_failed(
                    error_kind=e.kind.value,
                    error_message=str(e),
                )

    result = ReconciliationResult(imported=imported, skipped=skipped, failed=failed)

    if activity_logger:
        activity_logger.log_import_completed(
            imported_count=result.imported_count,
            skipped_count=result.skipped_count,
            failed_count=result.failed_count,
        )

    return result
