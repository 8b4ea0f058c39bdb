"""Registry of users that currently hold a live notification channel."""

from __future__ import annotations

from typing import Dict


class ConnectedPeerDirectory:
    """Map user identities to the handle of their active channel.

    The directory is a liveness cache, never a source of truth: losing it only
    means pushes are skipped until clients join again. Only the channel
    lifecycle (join and disconnect) writes to it; the dispatcher only reads.
    A user has at most one handle, the most recent join wins.
    """

    def __init__(self) -> None:
        self._handles_by_user: Dict[int, str] = {}
        self._users_by_handle: Dict[str, int] = {}

    def register(self, user_id: int, handle: str) -> None:
        """Point ``user_id`` at ``handle``, replacing any previous handle."""

        previous_user = self._users_by_handle.get(handle)
        if previous_user is not None and previous_user != user_id:
            if self._handles_by_user.get(previous_user) == handle:
                del self._handles_by_user[previous_user]

        previous_handle = self._handles_by_user.get(user_id)
        if previous_handle is not None and previous_handle != handle:
            self._users_by_handle.pop(previous_handle, None)

        self._handles_by_user[user_id] = handle
        self._users_by_handle[handle] = user_id

    def unregister(self, handle: str) -> int | None:
        """Forget ``handle`` and return the user it was registered for."""

        user_id = self._users_by_handle.pop(handle, None)
        if user_id is None:
            return None
        # A reconnect may already have replaced this handle for the user.
        if self._handles_by_user.get(user_id) == handle:
            del self._handles_by_user[user_id]
        return user_id

    def lookup(self, user_id: int) -> str | None:
        return self._handles_by_user.get(user_id)

    def connected_user_ids(self) -> list[int]:
        return list(self._handles_by_user)

    def clear(self) -> None:
        self._handles_by_user.clear()
        self._users_by_handle.clear()

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._handles_by_user

    def __len__(self) -> int:
        return len(self._handles_by_user)


peer_directory = ConnectedPeerDirectory()


__all__ = ["ConnectedPeerDirectory", "peer_directory"]
