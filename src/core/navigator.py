from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union

from core.models import ViewState
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class ViewTransition:
    previous: ViewState
    current: ViewState
    context: Dict[str, Any] = field(default_factory=dict)


TransitionListener = Callable[[ViewTransition], None]


class ViewNavigator:
    """
    Exactly one active view out of ViewState, catalog first.

    Any component may request a transition; requests for views that are not
    part of ViewState are dropped.
    """

    def __init__(self, initial: ViewState = ViewState.CATALOG) -> None:
        self.current = initial
        self._listeners: List[TransitionListener] = []

    def on_transition(self, listener: TransitionListener) -> None:
        self._listeners.append(listener)

    def switch_to(self, view: Union[ViewState, str], **context: Any) -> bool:
        target = self._resolve(view)
        if target is None:
            _logger.debug(f"switch_to: unknown view {view!r}, ignored")
            return False

        transition = ViewTransition(self.current, target, context)
        self.current = target
        _logger.debug(f"view {transition.previous.value} -> {target.value}")
        for listener in list(self._listeners):
            listener(transition)
        return True

    @staticmethod
    def _resolve(view: Union[ViewState, str]) -> Optional[ViewState]:
        if isinstance(view, ViewState):
            return view
        try:
            return ViewState(view)
        except ValueError:
            return None
