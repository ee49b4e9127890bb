from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from mr_trigger.exceptions import GitLabApiError, GitLabError
from mr_trigger.models.gitlab import Commit, Job, MergeRequest, Pipeline, Trigger
from .base import GitPlatform


PER_PAGE = 100


class GitLabClient(GitPlatform):
    def __init__(
        self,
        base_url: str = "https://gitlab.com",
        private_token: str | None = None,
        timeout: float = 30.0,
    ):
        self.private_token = private_token
        self.base_url = base_url.rstrip("/")
        self.api_url = f"{self.base_url}/api/v4"
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        if not self.private_token:
            return {}
        return {"PRIVATE-TOKEN": self.private_token}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send one API request and return the decoded JSON body.

        Raises GitLabApiError for non-2xx responses and GitLabError for
        transport failures or bodies that are not JSON.
        """
        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    f"{self.api_url}{path}",
                    headers=self._headers(),
                    timeout=self.timeout,
                    **kwargs,
                )
            except httpx.HTTPError as e:
                raise GitLabError(f"{method} {path} failed: {e}") from e

        if not response.is_success:
            raise GitLabApiError(response.status_code, response.reason_phrase, response.text)

        try:
            return response.json()
        except ValueError as e:
            raise GitLabError(f"{method} {path} returned invalid JSON: {e}") from e

    async def _list_all(self, path: str, params: dict[str, Any]) -> list[Any]:
        """Collect every page of a list endpoint."""
        items: list[Any] = []
        page = 1
        while True:
            batch = await self._request(
                "GET",
                path,
                params={**params, "per_page": PER_PAGE, "page": page},
            )
            if not isinstance(batch, list):
                raise GitLabError(f"GET {path} did not return a list")
            items.extend(batch)
            if len(batch) < PER_PAGE:
                return items
            page += 1

    @staticmethod
    def _decode(model, data: Any):
        adapter = model if isinstance(model, TypeAdapter) else TypeAdapter(model)
        try:
            return adapter.validate_python(data)
        except ValidationError as e:
            raise GitLabError(f"unexpected response: {e}") from e

    async def get_commit(self, project_id: int, sha: str) -> Commit:
        data = await self._request("GET", f"/projects/{project_id}/repository/commits/{sha}")
        return self._decode(Commit, data)

    async def list_triggers(self, project_id: int) -> list[Trigger]:
        data = await self._request("GET", f"/projects/{project_id}/triggers")
        return self._decode(list[Trigger], data)

    async def create_trigger(self, project_id: int, description: str) -> Trigger:
        data = await self._request(
            "POST",
            f"/projects/{project_id}/triggers",
            json={"description": description},
        )
        return self._decode(Trigger, data)

    async def trigger_pipeline(
        self,
        project_id: int,
        ref: str,
        token: str,
        variables: dict[str, str],
    ) -> Pipeline:
        form = {"token": token, "ref": ref}
        for name, value in variables.items():
            form[f"variables[{name}]"] = value
        data = await self._request(
            "POST",
            f"/projects/{project_id}/trigger/pipeline",
            data=form,
        )
        return self._decode(Pipeline, data)

    async def list_running_pipelines(self, project_id: int, ref: str) -> list[Pipeline]:
        """List running pipelines for a ref, oldest first."""
        data = await self._list_all(
            f"/projects/{project_id}/pipelines",
            {"ref": ref, "status": "running", "order_by": "id", "sort": "asc"},
        )
        return self._decode(list[Pipeline], data)

    async def list_pending_jobs(self, project_id: int, pipeline_id: int) -> list[Job]:
        data = await self._list_all(
            f"/projects/{project_id}/pipelines/{pipeline_id}/jobs",
            {"scope[]": "pending"},
        )
        return self._decode(list[Job], data)

    async def cancel_job(self, project_id: int, job_id: int) -> Job:
        data = await self._request("POST", f"/projects/{project_id}/jobs/{job_id}/cancel")
        return self._decode(Job, data)

    async def get_merge_request(self, project_id: int, mr_iid: int) -> MergeRequest:
        data = await self._request("GET", f"/projects/{project_id}/merge_requests/{mr_iid}")
        return self._decode(MergeRequest, data)

    async def set_remove_source_branch(self, project_id: int, mr_iid: int) -> MergeRequest:
        # https://docs.gitlab.com/ee/api/merge_requests.html#update-mr
        data = await self._request(
            "PUT",
            f"/projects/{project_id}/merge_requests/{mr_iid}",
            params={"remove_source_branch": "true"},
        )
        return self._decode(MergeRequest, data)
