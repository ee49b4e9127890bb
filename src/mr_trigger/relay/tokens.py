import logging

from mr_trigger.exceptions import GitLabError
from mr_trigger.platforms.base import GitPlatform


logger = logging.getLogger(__name__)

AUTO_TRIGGER_DESCRIPTION = "MR trigger (created automatically)"


class TriggerTokenResolver:
    def __init__(self, gitlab: GitPlatform, static_token: str | None = None):
        self.gitlab = gitlab
        self.static_token = static_token

    async def resolve(self, project_id: int) -> str:
        """Return a usable trigger token for the project.

        The configured token wins. Otherwise an existing live trigger is reused,
        and a new one is created as a last resort. Only a failed create raises.
        """
        if self.static_token:
            return self.static_token

        try:
            triggers = await self.gitlab.list_triggers(project_id)
        except GitLabError as e:
            logger.warning(f"Could not list triggers for project {project_id}: {e}")
            triggers = []

        for trigger in triggers:
            if trigger.deleted_at or not trigger.token:
                continue
            logger.info(f"[TOKEN] found existing - id: {trigger.id}, description: {trigger.description}")
            return trigger.token

        trigger = await self.gitlab.create_trigger(project_id, AUTO_TRIGGER_DESCRIPTION)
        if not trigger.token:
            raise GitLabError(f"created trigger {trigger.id} has no token")
        logger.info(f"[TOKEN] created - id: {trigger.id}")
        return trigger.token
