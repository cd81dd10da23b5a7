from __future__ import annotations

import logging
from threading import Lock
from typing import Callable, List

from companion.backend.ai.fallbacks import default_ui_state
from companion.backend.ai.models import EmotionAnalysis, UIState


logger = logging.getLogger(__name__)

UIStateListener = Callable[[UIState], None]


class UIStateContext:
	"""Holds the process-wide UI state and notifies listeners when it changes."""

	def __init__(self, initial: UIState | None = None):
		self._state = initial or default_ui_state()
		self._listeners: List[UIStateListener] = []
		self._lock = Lock()

	@property
	def current(self) -> UIState:
		with self._lock:
			return self._state.model_copy()

	def subscribe(self, listener: UIStateListener) -> Callable[[], None]:
		with self._lock:
			self._listeners.append(listener)

		def _unsubscribe() -> None:
			with self._lock:
				if listener in self._listeners:
					self._listeners.remove(listener)

		return _unsubscribe

	def update(self, state: UIState) -> UIState:
		with self._lock:
			self._state = state.model_copy()
			listeners = list(self._listeners)
			snapshot = self._state.model_copy()
		for listener in listeners:
			try:
				listener(snapshot)
			except Exception:
				logger.exception("UI state listener failed.")
		return snapshot

	def apply_analysis(self, analysis: EmotionAnalysis) -> UIState:
		return self.update(analysis.ui_state)

	def reset(self) -> UIState:
		return self.update(default_ui_state())
