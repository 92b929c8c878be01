"""Per-campaign in-progress flags for donate/deactivate actions."""

from enum import Enum
from typing import Dict


class ActionKind(Enum):
    """Kinds of transactions a user can submit against a campaign."""

    DONATE = "donate"
    DEACTIVATE = "deactivate"


class ActionState:
    """
    One id -> in-progress mapping per action kind.

    A missing key means "not in progress". Every update touches a single
    (kind, campaign id) key, so actions on different campaigns never
    overwrite each other's flags.
    """

    def __init__(self):
        self._flags: Dict[ActionKind, Dict[int, bool]] = {
            kind: {} for kind in ActionKind
        }

    def start(self, kind: ActionKind, campaign_id: int) -> None:
        self._flags[kind][campaign_id] = True

    def finish(self, kind: ActionKind, campaign_id: int) -> None:
        self._flags[kind][campaign_id] = False

    def is_in_progress(self, kind: ActionKind, campaign_id: int) -> bool:
        return self._flags[kind].get(campaign_id, False)

    @property
    def donate(self) -> Dict[int, bool]:
        return dict(self._flags[ActionKind.DONATE])

    @property
    def deactivate(self) -> Dict[int, bool]:
        return dict(self._flags[ActionKind.DEACTIVATE])

    def snapshot(self) -> Dict[str, Dict[int, bool]]:
        """Copy of both maps keyed by action name."""
        return {kind.value: dict(flags) for kind, flags in self._flags.items()}
