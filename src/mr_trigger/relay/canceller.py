import logging

from mr_trigger.exceptions import GitLabError
from mr_trigger.platforms.base import GitPlatform


logger = logging.getLogger(__name__)


class RedundantBuildCanceller:
    """Cancels pending jobs of running pipelines superseded by a newer one."""

    def __init__(self, gitlab: GitPlatform):
        self.gitlab = gitlab

    async def cancel_redundant(self, project_id: int, ref: str, exclude_pipeline: int) -> list[int]:
        """Cancel pending jobs on every other running pipeline for the ref.

        Best effort: failures are logged and the sweep goes on. Returns the ids
        of the jobs that were cancelled.
        """
        try:
            pipelines = await self.gitlab.list_running_pipelines(project_id, ref)
        except GitLabError as e:
            logger.error(f"Could not list running pipelines for {ref}: {e}")
            return []

        cancelled: list[int] = []
        for pipeline in sorted(pipelines, key=lambda p: p.id):
            if pipeline.id == exclude_pipeline:
                continue

            try:
                jobs = await self.gitlab.list_pending_jobs(project_id, pipeline.id)
            except GitLabError as e:
                logger.error(f"Could not list pending jobs of pipeline {pipeline.id}: {e}")
                continue

            for job in jobs:
                logger.info(f"[BUILD] In pipeline {pipeline.id} cancelling build: {job.id} ({job.name})")
                try:
                    await self.gitlab.cancel_job(project_id, job.id)
                except GitLabError as e:
                    logger.error(f"Failed to cancel build {job.id}: {e}")
                    continue
                cancelled.append(job.id)

        return cancelled
