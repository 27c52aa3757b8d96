"""
Command channel between the toggle surface and the orchestrator.

Messages are plain dicts:
    {"action": "updateLock", "value": true}  -> no reply
    {"action": "getState"}                   -> {"locked": bool}
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, StrictBool, ValidationError

from .engine import ReconciliationOrchestrator
from .errors import InvalidCommandError


class UpdateLockMessage(BaseModel):
    action: Literal["updateLock"]
    value: StrictBool


class GetStateMessage(BaseModel):
    action: Literal["getState"]


class CommandChannel:
    """
    Dispatches toggle-surface messages to an orchestrator.
    """

    def __init__(self, orchestrator: ReconciliationOrchestrator):
        self.orchestrator = orchestrator

    async def send(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Handle one message.

        Raises:
            InvalidCommandError: If the action is unknown or the fields are invalid
        """
        action = message.get("action") if isinstance(message, dict) else None
        try:
            if action == "updateLock":
                command = UpdateLockMessage.model_validate(message)
                await self.orchestrator.update_lock(command.value)
                return None
            if action == "getState":
                GetStateMessage.model_validate(message)
                state = await self.orchestrator.get_state()
                return state.model_dump()
        except ValidationError as e:
            raise InvalidCommandError(f"Invalid {action} message: {e}") from e

        raise InvalidCommandError(f"Unknown action: {action!r}")
