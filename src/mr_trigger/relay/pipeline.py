from mr_trigger.models.webhook import GitLabMergeRequest, MergeRequestEvent
from mr_trigger.platforms.base import GitPlatform


VARIABLE_PREFIX = "CI_MERGE_REQUEST"


def pipeline_ref(mr: GitLabMergeRequest) -> str:
    """Merged requests build the branch they landed on, the rest their source branch."""
    if mr.state == "merged":
        return mr.target_branch
    return mr.source_branch


def build_variables(mr: GitLabMergeRequest) -> dict[str, str]:
    return {
        VARIABLE_PREFIX: "true",
        f"{VARIABLE_PREFIX}_ID": str(mr.id),
        f"{VARIABLE_PREFIX}_IID": str(mr.iid),
        f"{VARIABLE_PREFIX}_ACTION": mr.action or "",
        f"{VARIABLE_PREFIX}_STATE": mr.state,
        f"{VARIABLE_PREFIX}_TARGET_URL": mr.target.http_url,
        f"{VARIABLE_PREFIX}_TARGET_BRANCH": mr.target_branch,
        f"{VARIABLE_PREFIX}_SOURCE_BRANCH": mr.source_branch,
    }


class PipelineTrigger:
    def __init__(self, gitlab: GitPlatform):
        self.gitlab = gitlab

    async def run(self, event: MergeRequestEvent, token: str) -> int:
        """Trigger a pipeline for the merge request and return its id."""
        mr = event.object_attributes
        pipeline = await self.gitlab.trigger_pipeline(
            project_id=mr.source_project_id,
            ref=pipeline_ref(mr),
            token=token,
            variables=build_variables(mr),
        )
        return pipeline.id
