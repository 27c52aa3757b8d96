"""
Lock toggle surface for Bookmark Guard.
"""

from .channel import CommandChannel


class LockToggle:
    """
    A single checkbox bound to the protection flag.

    open() reflects the persisted state; set_checked() is what a user click
    calls with the checkbox's new value.
    """

    def __init__(self, channel: CommandChannel):
        self.channel = channel
        self.checked = False

    async def open(self) -> bool:
        state = await self.channel.send({"action": "getState"})
        self.checked = bool(state and state.get("locked"))
        return self.checked

    async def set_checked(self, checked: bool) -> None:
        self.checked = checked
        await self.channel.send({"action": "updateLock", "value": checked})
