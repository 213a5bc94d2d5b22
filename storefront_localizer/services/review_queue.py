"""Human review queue for low-quality machine translations."""

import logging
import uuid
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

from ..errors import InvalidStateError, NotFoundError, ValidationError
from ..models import ReviewItem, ReviewStatus, content_type_of
from .json_store import AsyncJsonStore

logger = logging.getLogger(__name__)

ResolutionCallback = Callable[[ReviewItem], Awaitable[None]]

# Content types whose reviews jump the queue
PRIORITY_WEIGHTS = {"product": 1.5}

ACTIONS = ("approve", "reject")


class ReviewQueue:
    """
    Holds translations below the quality bar until a reviewer decides.

    Items move from pending to approved or rejected exactly once. Approved
    items are handed to `on_approved`, which the pipeline uses to write the
    final translation back into translation memory; rejected items go to
    `on_rejected`, which drops the machine translation from memory.
    """

    def __init__(
        self,
        store: Optional[AsyncJsonStore] = None,
        on_approved: Optional[ResolutionCallback] = None,
        on_rejected: Optional[ResolutionCallback] = None,
    ):
        """
        Initialize the review queue.

        Args:
            store: Optional persistent store (best effort)
            on_approved: Awaited with each newly approved item
            on_rejected: Awaited with each newly rejected item
        """
        self.backend = store
        self.on_approved = on_approved
        self.on_rejected = on_rejected
        self._items: Dict[str, ReviewItem] = {}

    @staticmethod
    def compute_priority(quality_score: float, context: Optional[Mapping[str, Any]] = None) -> float:
        """Lower quality and more important content review first."""
        weight = PRIORITY_WEIGHTS.get(content_type_of(context), 1.0)
        return (1 - quality_score) * weight

    async def enqueue(
        self,
        original_text: str,
        translation: str,
        from_lang: str,
        to_lang: str,
        quality_score: float,
        context: Optional[Mapping[str, Any]] = None,
    ) -> ReviewItem:
        """Add a pending review item."""
        item = ReviewItem(
            id=f"review_{uuid.uuid4().hex[:12]}",
            original_text=original_text,
            translation=translation,
            from_lang=from_lang,
            to_lang=to_lang,
            quality_score=quality_score,
            priority=self.compute_priority(quality_score, context),
            context=dict(context or {}),
        )
        self._items[item.id] = item
        logger.info(
            "Queued translation for review %s (%s -> %s, score %.2f, content type %s)",
            item.id, from_lang, to_lang, quality_score, content_type_of(context) or "-",
        )
        await self._persist(item)
        return item

    def get(self, item_id: str) -> ReviewItem:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(f"Review item not found: {item_id}")
        return item

    def list(self, status: Optional[ReviewStatus] = None) -> List[ReviewItem]:
        """Items sorted pending first, then by priority (highest first)."""
        if status is not None:
            status = ReviewStatus(status)
        items = [i for i in self._items.values() if status is None or i.status == status]
        items.sort(key=lambda i: (not i.is_pending, -i.priority, i.created_at))
        return items

    @property
    def pending_count(self) -> int:
        return sum(1 for item in self._items.values() if item.is_pending)

    async def resolve(
        self,
        item_id: str,
        action: str,
        final_translation: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ReviewItem:
        """
        Approve or reject a pending item.

        Args:
            item_id: Review item ID
            action: "approve" or "reject"
            final_translation: Reviewer's translation (approve only; defaults to the AI one)
            notes: Reviewer notes

        Raises:
            ValidationError: unknown action
            NotFoundError: unknown item
            InvalidStateError: item already approved or rejected
        """
        if action not in ACTIONS:
            raise ValidationError(f"Invalid review action: {action!r} (expected approve or reject)")

        item = self.get(item_id)
        if not item.is_pending:
            raise InvalidStateError(f"Review item {item_id} is already {item.status.value}")

        if action == "approve":
            item.status = ReviewStatus.APPROVED
            item.final_translation = final_translation or item.translation
        else:
            item.status = ReviewStatus.REJECTED
        item.reviewer_notes = notes
        item.reviewed_at = datetime.now().isoformat()

        logger.info(
            "Review %s %s (%s -> %s)", item.id, item.status.value, item.from_lang, item.to_lang
        )
        await self._persist(item)

        callback = self.on_approved if item.status == ReviewStatus.APPROVED else self.on_rejected
        if callback is not None:
            await callback(item)

        return item

    async def _persist(self, item: ReviewItem) -> None:
        if self.backend is None:
            return
        try:
            await self.backend.save(item.id, item.to_dict())
        except Exception as e:
            logger.error(
                "Failed to persist review item %s (%s -> %s): %s",
                item.id, item.from_lang, item.to_lang, e,
            )

    async def load(self) -> int:
        """Load persisted items; returns how many were loaded."""
        if self.backend is None:
            return 0
        try:
            records = await self.backend.load()
        except Exception as e:
            logger.error("Failed to load review queue: %s", e)
            return 0

        loaded = 0
        for record in records.values():
            try:
                item = ReviewItem.from_dict(record)
            except (TypeError, ValueError) as e:
                logger.warning("Skipping malformed review record: %s", e)
                continue
            self._items[item.id] = item
            loaded += 1
        return loaded

    def __len__(self) -> int:
        return len(self._items)
