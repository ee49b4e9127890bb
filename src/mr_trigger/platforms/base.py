from abc import ABC, abstractmethod

from mr_trigger.models.gitlab import Commit, Job, MergeRequest, Pipeline, Trigger


class GitPlatform(ABC):
    @abstractmethod
    async def get_commit(self, project_id: int, sha: str) -> Commit:
        pass

    @abstractmethod
    async def list_triggers(self, project_id: int) -> list[Trigger]:
        pass

    @abstractmethod
    async def create_trigger(self, project_id: int, description: str) -> Trigger:
        pass

    @abstractmethod
    async def trigger_pipeline(
        self,
        project_id: int,
        ref: str,
        token: str,
        variables: dict[str, str],
    ) -> Pipeline:
        pass

    @abstractmethod
    async def list_running_pipelines(self, project_id: int, ref: str) -> list[Pipeline]:
        pass

    @abstractmethod
    async def list_pending_jobs(self, project_id: int, pipeline_id: int) -> list[Job]:
        pass

    @abstractmethod
    async def cancel_job(self, project_id: int, job_id: int) -> Job:
        pass

    @abstractmethod
    async def get_merge_request(self, project_id: int, mr_iid: int) -> MergeRequest:
        pass

    @abstractmethod
    async def set_remove_source_branch(self, project_id: int, mr_iid: int) -> MergeRequest:
        pass
