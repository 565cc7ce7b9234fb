"""Doctor rating aggregation."""

from decimal import ROUND_HALF_UP, Decimal
from uuid import UUID

import structlog
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.doctors import doctor_profiles
from app.models.reviews import reviews

logger = structlog.get_logger(__name__)

_TWO_PLACES = Decimal("0.01")


def mean_rating(ratings: list[int]) -> Decimal:
    """Arithmetic mean of review ratings, rounded half-up to 2 decimals."""
    total = Decimal(sum(ratings))
    return (total / Decimal(len(ratings))).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


class RatingService:
    """Recomputes a doctor's average rating from all of their reviews."""

    @staticmethod
    async def recompute_rating(
        db: AsyncSession,
        doctor_id: UUID,
        submitted_rating: int,
    ) -> Decimal:
        """
        Recompute and store a doctor's rating.

        Scans every review for the doctor instead of maintaining a running
        average. The caller owns the transaction: the rating is written in the
        same session as the review insert and committed with it.

        Args:
            db: Database session
            doctor_id: Doctor profile ID
            submitted_rating: Rating of the review that triggered the recompute,
                used as-is when no reviews are visible yet

        Returns:
            The stored rating
        """
        result = await db.execute(select(reviews.c.rating).where(reviews.c.doctor_id == doctor_id))
        ratings = list(result.scalars().all())

        if not ratings:
            rating = Decimal(submitted_rating).quantize(_TWO_PLACES)
        else:
            rating = mean_rating(ratings)

        await db.execute(
            update(doctor_profiles)
            .where(doctor_profiles.c.id == doctor_id)
            .values(rating=rating, rating_count=len(ratings))
        )

        logger.info(
            "doctor_rating_recomputed",
            doctor_id=str(doctor_id),
            rating=str(rating),
            review_count=len(ratings),
        )
        return rating
