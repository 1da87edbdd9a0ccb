"""
Bulk import of evaluations.

Each record is validated, scored and inserted on its own. A record that
fails (bad payload, unknown employee, database error) is reported and
skipped; the rest of the batch still goes in. Inserts run inside a
SAVEPOINT per record so one failing INSERT only rolls back itself.
"""

import logging
from typing import Any, List
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import evaluation as evaluation_crud
from app.crud import user as user_crud
from app.models.evaluation import EvaluationStatus
from app.schemas.evaluation import BulkEvaluationItem, BulkItemResult
from app.services.scoring import calculate_score

logger = logging.getLogger(__name__)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


def _failure(index: int, message: str) -> BulkItemResult:
    return BulkItemResult(index=index, success=False, error=message)


def import_one(db: Session, index: int, record: Any) -> BulkItemResult:
    """Validate, score and insert a single bulk record."""
    if not isinstance(record, dict):
        return _failure(index, "Invalid record format. Expected an object.")

    # Score first: missing or out-of-range sub-scores get the same messages
    # as the single-create endpoint
    try:
        calculate_score(record)
        item = BulkEvaluationItem.model_validate(record)
    except ValidationError as e:
        return _failure(index, _format_validation_error(e))
    except ValueError as e:
        return _failure(index, str(e))

    employee = user_crud.get_by_employee_code(db, item.employee_id)
    if not employee:
        return _failure(index, f"Employee with ID {item.employee_id} not found")

    if not user_crud.get_by_id(db, item.evaluator_id):
        return _failure(index, f"Evaluator {item.evaluator_id} not found")

    evaluation = evaluation_crud.build(
        scores=item.model_dump(),
        employee_id=employee.id,
        evaluator_id=item.evaluator_id,
        evaluation_type=item.type,
        month=item.month,
        year=item.year,
        comments=item.comments,
        status=EvaluationStatus.PENDING,
    )

    try:
        with db.begin_nested():
            db.add(evaluation)
    except SQLAlchemyError as e:
        logger.error(f"Bulk import record {index} failed: {e}")
        return _failure(index, f"Database error: {e}")

    return BulkItemResult(index=index, success=True, evaluation_id=evaluation.id)


def import_evaluations(db: Session, records: List[Any]) -> List[BulkItemResult]:
    """
    Import ``records`` and commit every successful one.

    Returns:
        One result per input record, in input order
    """
    results = [import_one(db, index, record) for index, record in enumerate(records)]
    db.commit()

    successful = sum(1 for r in results if r.success)
    logger.info(f"Bulk import processed {len(results)} evaluations: {successful} successful, {len(results) - successful} failed")

    return results
