"""
Advertise-with-us leads: public submission and the admin inbox.
"""

from typing import Optional, List, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from marketplace.repositories.engagement import AdvertisementSubmissionRepository
from marketplace.models.engagement import AdvertisementSubmission, SubmissionStatus
from marketplace.schemas.engagement import AdvertisementSubmissionCreate, AdvertisementStats
from marketplace.utils.exceptions import APIException, NotFoundError, BadRequestError
import uuid
import logging

logger = logging.getLogger(__name__)


class AdvertisementService:

    def __init__(self, db_session: AsyncSession):
        self.submission_repo = AdvertisementSubmissionRepository(db_session)

    async def submit(self, data: AdvertisementSubmissionCreate) -> AdvertisementSubmission:
        """Store a validated lead with status new."""
        try:
            submission_data = data.model_dump()
            submission_data["status"] = SubmissionStatus.NEW
            submission = await self.submission_repo.create(submission_data)
            logger.info(
                f"Advertisement submission from {submission.email} for {submission.banner_type}",
                extra={"submission_id": str(submission.id)}
            )
            return submission
        except APIException:
            raise
        except Exception as e:
            logger.error(f"Failed to store advertisement submission: {e}")
            raise BadRequestError(f"Failed to submit advertisement request: {str(e)}")

    async def list_submissions(
        self,
        status: Optional[SubmissionStatus] = None,
        banner_type: Optional[str] = None,
        search: Optional[str] = None,
        skip: int = 0,
        limit: int = 20
    ) -> Tuple[List[AdvertisementSubmission], int]:
        return await self.submission_repo.search(status, banner_type, search, skip, limit)

    async def get_submission(self, submission_id: uuid.UUID) -> AdvertisementSubmission:
        """Admin read; opening a new lead marks it viewed."""
        submission = await self.submission_repo.get_by_id(submission_id)
        if not submission:
            raise NotFoundError("Advertisement submission", str(submission_id))

        if submission.status == SubmissionStatus.NEW:
            submission = await self.submission_repo.save(submission, {"status": SubmissionStatus.VIEWED})
        return submission

    async def set_status(self, submission_id: uuid.UUID, status: SubmissionStatus) -> AdvertisementSubmission:
        submission = await self.submission_repo.get_by_id(submission_id)
        if not submission:
            raise NotFoundError("Advertisement submission", str(submission_id))
        return await self.submission_repo.save(submission, {"status": status})

    async def delete_submission(self, submission_id: uuid.UUID) -> None:
        if not await self.submission_repo.delete(submission_id):
            raise NotFoundError("Advertisement submission", str(submission_id))

    async def get_stats(self) -> AdvertisementStats:
        by_status = await self.submission_repo.count_by_status()
        return AdvertisementStats(
            total=sum(by_status.values()),
            new=by_status[SubmissionStatus.NEW.value],
            viewed=by_status[SubmissionStatus.VIEWED.value],
            contacted=by_status[SubmissionStatus.CONTACTED.value],
            by_banner_type=await self.submission_repo.count_by_banner_type(),
        )
