from .gitlab import Commit, Job, MergeRequest, Pipeline, Trigger
from .webhook import GitLabCommit, GitLabMergeRequest, GitLabProject, MergeRequestEvent

__all__ = [
    "Commit",
    "Job",
    "MergeRequest",
    "Pipeline",
    "Trigger",
    "GitLabCommit",
    "GitLabMergeRequest",
    "GitLabProject",
    "MergeRequestEvent",
]
