"""
Referral Board - job openings posted by alumni.

ACTIVE jobs are visible to every signed-in user with no eligibility gating.
Only the posting alumnus may open or close a job.
"""

from typing import List, Optional

from loguru import logger

from placement_portal.core.errors import ForbiddenError, NotFoundError, ValidationError
from placement_portal.db.repositories import Store
from placement_portal.models.entities import AlumniJob, JobStatus
from placement_portal.utils.timestamp import utcnow

DEFAULT_ALUMNI_NAME = "Alumni"


class ReferralService:

    def __init__(self, store: Store):
        self.store = store

    def post_job(
        self,
        alumni_id: int,
        company_name: Optional[str],
        job_title: Optional[str],
        description: Optional[str] = None,
        location: Optional[str] = None,
        ctc: Optional[str] = None,
        apply_link: Optional[str] = None,
        expiry_date: Optional[str] = None,
    ) -> AlumniJob:
        if not company_name or not company_name.strip() or not job_title or not job_title.strip():
            raise ValidationError("Company name and job title are required")

        job = self.store.jobs.add(AlumniJob(
            alumni_user_id=alumni_id,
            company_name=company_name.strip(),
            job_title=job_title.strip(),
            description=description or "",
            location=location or "",
            ctc=ctc or "",
            apply_link=apply_link or "",
            expiry_date=expiry_date or None,
            created_at=utcnow(),
            status=JobStatus.active,
        ))
        logger.info(f"Alumni {alumni_id} posted job {job.id}: {job.job_title} @ {job.company_name}")
        return job

    def list_active_jobs(self) -> List[dict]:
        """ACTIVE jobs, each paired with the poster's name."""
        jobs = []
        for job in self.store.jobs.list_by_status(JobStatus.active):
            alumnus = self.store.users.get(job.alumni_user_id)
            jobs.append({
                "job": job,
                "alumni_name": alumnus.name if alumnus and alumnus.name else DEFAULT_ALUMNI_NAME,
            })
        return jobs

    def my_jobs(self, alumni_id: int) -> List[AlumniJob]:
        return self.store.jobs.list_for_alumni(alumni_id)

    def set_job_status(self, alumni_id: int, job_id: int, status: Optional[str]) -> AlumniJob:
        """
        Raises:
            NotFoundError: unknown job
            ForbiddenError: job posted by another alumnus
            ValidationError: status other than ACTIVE / CLOSED
        """
        job = self.store.jobs.get(job_id)
        if job is None:
            raise NotFoundError("Job referral not found")
        if job.alumni_user_id != alumni_id:
            logger.warning(f"Alumni {alumni_id} tried to change job {job_id} owned by {job.alumni_user_id}")
            raise ForbiddenError("You can only update your own job postings")

        try:
            new_status = JobStatus(status)
        except ValueError:
            raise ValidationError("Status must be ACTIVE or CLOSED")

        updated = self.store.jobs.set_status(job_id, new_status)
        logger.info(f"Job {job_id} status set to {new_status.value}")
        return updated
