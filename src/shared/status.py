"""Status channel: the transient loading/success/error overlay state.

One instance is shared by every surface. A ``loading`` status cannot be
dismissed by the user (outside click or the overlay's own button); it stays
until the operation that raised it calls ``show`` or ``hide`` again.
"""

from dataclasses import dataclass
from enum import Enum

from shared.observable import Observable


class StatusKind(Enum):
    SUCCESS = "success"
    ERROR = "error"
    LOADING = "loading"


@dataclass(frozen=True)
class StatusSnapshot:
    is_open: bool
    kind: StatusKind
    title: str
    message: str

    @property
    def dismissible(self) -> bool:
        return self.kind != StatusKind.LOADING


class StatusChannel(Observable):
    def __init__(self) -> None:
        super().__init__()
        self.is_open = False
        self.kind = StatusKind.LOADING
        self.title = ""
        self.message = ""

    @property
    def dismissible(self) -> bool:
        return self.kind != StatusKind.LOADING

    def snapshot(self) -> StatusSnapshot:
        return StatusSnapshot(is_open=self.is_open, kind=self.kind, title=self.title, message=self.message)

    def show(self, kind: StatusKind | str, title: str, message: str) -> None:
        """Open the overlay, replacing whatever it showed before."""
        with self._lock:
            self.kind = StatusKind(kind)
            self.title = title
            self.message = message
            self.is_open = True
            snapshot = self.snapshot()
        self._notify(snapshot)

    def hide(self) -> None:
        with self._lock:
            self.is_open = False
            snapshot = self.snapshot()
        self._notify(snapshot)

    def dismiss(self) -> bool:
        """User-initiated close. Returns False when the status is not dismissible."""
        if not self.is_open or not self.dismissible:
            return False
        self.hide()
        return True
