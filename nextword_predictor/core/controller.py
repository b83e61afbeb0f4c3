# nextword_predictor/core/controller.py
"""
SelectionController - the session state machine.

States:   IDLE -> LOADING -> READY | ERROR
          READY | ERROR -> LOADING (next fetch) or IDLE (reset)

Entry points (the only way SessionState changes):
  - request_predictions(text)
  - select_word(word)   append word, then fetch for the new text
  - reset()             back to the initial text, then fetch

Every fetch takes a generation ticket. A fetch that completes after a newer one
has started is dropped rather than applied.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List

from nextword_predictor.context.joiner import append_word
from nextword_predictor.core.protocols import EMPTY_SET, SessionState, StateListener, Status
from nextword_predictor.core.service import PredictionService
from nextword_predictor.utils.logger_utils import Log

EMPTY_INPUT_MESSAGE = "empty input"
FETCH_FAILED_MESSAGE = "Failed to get predictions. Please try again."


class SelectionController:

    def __init__(self, service: PredictionService, initial_text: str = ""):
        self.service = service
        self.initial_text = initial_text
        self._state = SessionState(text=initial_text)
        self._generation = 0
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    # Listeners -------------------------------------------------------------
    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                Log.error(f"[Controller] state listener failed: {e!r}")

    # Transitions -----------------------------------------------------------
    async def request_predictions(self, text: str) -> SessionState:
        self._generation += 1
        ticket = self._generation

        if not text or not text.strip():
            self._set_state(replace(self._state, predictions=EMPTY_SET,
                                    status=Status.ERROR, error_message=EMPTY_INPUT_MESSAGE))
            return self._state

        # predictions are cleared before the fetch starts
        self._set_state(SessionState(text=text, predictions=EMPTY_SET, status=Status.LOADING))

        try:
            preds = await self.service.predict(text)
        except Exception as e:
            if ticket != self._generation:
                Log.debug(f"[Controller] dropping failure of superseded request #{ticket}")
                return self._state
            Log.error(f"[Controller] prediction failed for {text!r}: {e!r}")
            self._set_state(SessionState(text=text, predictions=EMPTY_SET,
                                         status=Status.ERROR, error_message=FETCH_FAILED_MESSAGE))
            return self._state

        if ticket != self._generation:
            Log.debug(f"[Controller] dropping stale result of request #{ticket}")
            return self._state

        self._set_state(SessionState(text=text, predictions=preds, status=Status.READY))
        return self._state

    async def select_word(self, word: str) -> SessionState:
        if self._state.status is not Status.READY:
            Log.warning(f"[Controller] select_word({word!r}) ignored in state {self._state.status.value}")
            return self._state
        if not word or not word.strip():
            Log.warning("[Controller] select_word ignored an empty word")
            return self._state

        new_text = append_word(self._state.text, word.strip())
        Log.write(f"accepted: {word}")
        return await self.request_predictions(new_text)

    async def reset(self) -> SessionState:
        self._generation += 1
        self._set_state(SessionState(text=self.initial_text, predictions=EMPTY_SET, status=Status.IDLE))
        return await self.request_predictions(self.initial_text)
