import logging

from mr_trigger.models.gitlab import Pipeline
from mr_trigger.platforms.base import GitPlatform


logger = logging.getLogger(__name__)


class IdempotencyGuard:
    def __init__(self, gitlab: GitPlatform):
        self.gitlab = gitlab

    async def existing_pipeline(self, project_id: int, sha: str) -> Pipeline | None:
        """Return the pipeline already associated with a commit, if any.

        Lookup errors propagate: without an answer the caller must not trigger.
        """
        commit = await self.gitlab.get_commit(project_id, sha)
        if commit.last_pipeline is None:
            return None
        logger.debug(f"Commit {sha} has pipeline {commit.last_pipeline.id}")
        return commit.last_pipeline
