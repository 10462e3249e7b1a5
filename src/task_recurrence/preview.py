import logging
from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from task_recurrence.domain.rule import InvalidRule, normalize_rule
from task_recurrence.expander import ExpansionOptions, expand
from task_recurrence.summary import describe

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_LIMIT = 10


class RecurrencePreview(BaseModel):
    """
    Summary and upcoming dates of a rule, as shown next to a task form.
    """
    summary: str = Field("", description="Sentence describing the rule")
    occurrences: List[date] = Field(default_factory=list, description="First dates of the expansion, capped at the preview limit")
    total: int = Field(0, description="Number of dates the expansion produced before the preview limit was applied")
    error: Optional[str] = Field(None, description="Why the rule could not be previewed")

    @property
    def is_empty(self) -> bool:
        return not self.occurrences


def build_preview(raw: Any, limit: int = DEFAULT_PREVIEW_LIMIT, options: Optional[ExpansionOptions] = None) -> RecurrencePreview:
    """
    Preview a rule without failing on bad input.

    Args:
        raw (Any): A RecurrenceRule or raw rule fields.
        limit (int): Maximum number of dates to show.
        options (Optional[ExpansionOptions]): Bounds of the underlying expansion.

    Returns:
        RecurrencePreview: The preview. Invalid input produces an empty preview with ``error`` set.
    """
    try:
        rule = normalize_rule(raw)
    except InvalidRule as e:
        logger.warning(f"Cannot preview recurrence rule: {e}")
        return RecurrencePreview(error=str(e))

    dates = list(expand(rule, options))
    return RecurrencePreview(
        summary=describe(rule),
        occurrences=dates[:max(limit, 0)],
        total=len(dates),
    )
