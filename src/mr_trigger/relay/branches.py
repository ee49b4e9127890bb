import fnmatch
import logging

from mr_trigger.exceptions import GitLabError
from mr_trigger.platforms.base import GitPlatform


logger = logging.getLogger(__name__)


class SourceBranchRemover:
    def __init__(self, gitlab: GitPlatform, exceptions: list[str] | None = None):
        self.gitlab = gitlab
        self.exceptions = exceptions or []

    def _is_exception(self, branch: str) -> bool:
        """Check if branch matches any exception pattern."""
        for pattern in self.exceptions:
            if fnmatch.fnmatchcase(branch, pattern):
                return True
        return False

    async def mark_for_removal(self, project_id: int, mr_iid: int, source_branch: str) -> bool:
        """Ask GitLab to remove the source branch once the MR is merged.

        Leaves exception branches and MRs with an explicit choice untouched.
        Returns True if the MR was updated.
        """
        if self._is_exception(source_branch):
            logger.info(f"Modifying remove_source_branch for branch: {source_branch} was omitted!")
            return False

        try:
            mr = await self.gitlab.get_merge_request(project_id, mr_iid)
            if mr.force_remove_source_branch:
                logger.info(f"[MR] !{mr_iid} already removes its source branch")
                return False
            mr = await self.gitlab.set_remove_source_branch(project_id, mr_iid)
        except GitLabError as e:
            logger.error(f"[MR] ERROR setting remove_source_branch for MR !{mr_iid}: {e}")
            return False

        logger.info(
            f"[MR] updated flags: should_remove_source_branch: {mr.should_remove_source_branch}, "
            f"force_remove_source_branch: {mr.force_remove_source_branch}"
        )
        return True
