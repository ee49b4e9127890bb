from pydantic import BaseModel


class Pipeline(BaseModel):
    id: int
    ref: str | None = None
    status: str | None = None


class Commit(BaseModel):
    id: str
    message: str = ""
    last_pipeline: Pipeline | None = None


class Job(BaseModel):
    id: int
    name: str = ""
    status: str | None = None
    pipeline: Pipeline | None = None


class Trigger(BaseModel):
    id: int
    token: str | None = None
    description: str | None = None
    deleted_at: str | None = None


class MergeRequest(BaseModel):
    iid: int
    should_remove_source_branch: bool | None = None
    force_remove_source_branch: bool | None = None
