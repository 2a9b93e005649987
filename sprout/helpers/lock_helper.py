import time
from typing import Dict, Optional

from ..constants import PENDING_ACTION_TITLES
from ..models import PendingAction


class LockHelper:
    """
    Tracks the garden actions that are still waiting on the advisor (planting, a new day).
    A player with a pending action cannot start another garden command until it finishes.
    """

    def __init__(self):
        self._pending: Dict[int, PendingAction] = {}

    def get_user_lock(self, user_id: int) -> Optional[PendingAction]:
        return self._pending.get(user_id)

    def add_lock(self, user_id: int, action: str, message: str) -> bool:
        """Marks an action as pending. Returns False if the player already has one in progress."""
        if user_id in self._pending:
            return False

        self._pending[user_id] = PendingAction(user_id=user_id, action=action, message=message,
                                               started_at=time.monotonic())
        return True

    def remove_lock_for_user(self, user_id: int):
        self._pending.pop(user_id, None)

    def clear_all_locks(self):
        """Removes all pending actions. To be used on cog unload."""
        self._pending.clear()

    @staticmethod
    def get_lock_title(lock: PendingAction) -> str:
        return PENDING_ACTION_TITLES.get(lock.action, "⏳ Garden Busy")

    @staticmethod
    def get_lock_age(lock: PendingAction, now: Optional[float] = None) -> int:
        """Whole seconds since the action started."""
        now = time.monotonic() if now is None else now
        return max(0, int(now - lock.started_at))
