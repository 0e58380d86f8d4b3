import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..errors import BackendError

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)

def parse_row(model: Type[RecordT], row: Optional[Dict[str, Any]]) -> Optional[RecordT]:
    """Validate a backend row against its record type, rejecting malformed shapes."""
    if row is None:
        return None
    try:
        return model.model_validate(dict(row))
    except ValidationError as e:
        logger.error(f"Malformed {model.__name__} row from backend: {e}")
        raise BackendError(f"Malformed {model.__name__} returned by backend") from e

def parse_rows(model: Type[RecordT], rows: Iterable[Dict[str, Any]]) -> List[RecordT]:
    return [parse_row(model, row) for row in rows]

def utcnow() -> datetime:
    return datetime.now(timezone.utc)
