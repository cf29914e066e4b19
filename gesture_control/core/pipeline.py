"""
Per-frame orchestrator: landmarks -> classifier -> debouncer -> events.

Architecture:
    hand detector results -> LandmarkExtractor (validate)
    -> GestureClassifier -> GestureDebouncer -> on_gesture callbacks / EventBus

Each detector result drives exactly one synchronous step; nothing here
blocks or holds resources. If frames stop arriving the state simply freezes.
"""

import logging
from typing import Callable, Optional

from gesture_control.core.types import GestureLabel, PipelineState
from gesture_control.core.events import EventBus, Events
from gesture_control.modules.detection.landmark_extractor import (
    LandmarkExtractor, MalformedLandmarksError,
)
from gesture_control.modules.recognition.gesture_classifier import GestureClassifier
from gesture_control.modules.control.debouncer import GestureDebouncer

logger = logging.getLogger(__name__)


class GesturePipeline:
    """Drives one classify + debounce step per detector frame."""

    def __init__(
        self,
        classifier: GestureClassifier = None,
        debouncer: GestureDebouncer = None,
        extractor: LandmarkExtractor = None,
        event_bus: EventBus = None,
    ):
        self._extractor = extractor or LandmarkExtractor()
        self._classifier = classifier or GestureClassifier()
        self._debouncer = debouncer or GestureDebouncer()
        self._bus = event_bus or EventBus()
        self._observers = []
        self._state = PipelineState()
        self._rejected_count = 0

    def process(self, hand_landmarks, now: float = None) -> Optional[GestureLabel]:
        """Run one frame through the pipeline.

        Args:
            hand_landmarks: one hand's landmarks (see LandmarkExtractor.extract),
                or None when the detector found no hand
            now: frame timestamp in milliseconds; defaults to the debouncer clock

        Returns:
            The confirmed label if this frame emitted one, else None
        """
        state = self._state
        state.frame_count += 1
        if now is not None:
            state.timestamp = now

        landmarks = None
        if hand_landmarks is not None:
            try:
                landmarks = self._extractor.extract(hand_landmarks)
            except MalformedLandmarksError as e:
                self._rejected_count += 1
                logger.warning("Frame %d rejected, treating as no hand: %s",
                               state.frame_count, e)
                self._bus.emit(Events.FRAME_REJECTED, reason=str(e),
                               frame=state.frame_count)

        if landmarks is None:
            if state.hand_detected:
                self._bus.emit(Events.HAND_LOST, frame=state.frame_count)
            state.hand_detected = False
            label = GestureLabel.NONE
        else:
            if not state.hand_detected:
                self._bus.emit(Events.HAND_DETECTED, landmarks=landmarks,
                               frame=state.frame_count)
            state.hand_detected = True
            label = self._classifier.classify(landmarks)

        if label is not state.current_label and not label.is_none:
            self._bus.emit(Events.GESTURE_DETECTED, label=label, frame=state.frame_count)
        state.current_label = label

        confirmed = self._debouncer.update(label, now)
        if confirmed is not None:
            state.last_confirmed = confirmed
            state.confirmed_count += 1
            self._bus.emit(Events.GESTURE_CONFIRMED, label=confirmed,
                           timestamp=now, frame=state.frame_count)

        self._notify_observers()
        return confirmed

    def on_results(self, results, now: float = None) -> Optional[GestureLabel]:
        """Adapter for MediaPipe Hands results objects (first hand only)."""
        return self.process(self._extractor.first_hand(results), now)

    def on_gesture(self, callback: Callable[[GestureLabel], None]):
        """Register a callback for confirmed gestures."""
        self._debouncer.on_confirmed(callback)

    def add_status_observer(self, observer):
        """Register a StatusObserver; it is called after every frame."""
        self._observers.append(observer)

    def remove_status_observer(self, observer):
        self._observers = [o for o in self._observers if o is not observer]

    def _notify_observers(self):
        for observer in list(self._observers):
            try:
                observer.update_status(self._state)
            except Exception as e:
                logger.error("Status observer error [%s]: %s",
                             type(observer).__name__, e)

    def reset(self):
        """Forget all tracking state (e.g. when the detector is restarted)."""
        self._debouncer.reset()
        self._state = PipelineState()
        self._rejected_count = 0
        logger.debug("Pipeline reset")

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def debouncer(self) -> GestureDebouncer:
        return self._debouncer

    @property
    def classifier(self) -> GestureClassifier:
        return self._classifier

    @property
    def rejected_count(self) -> int:
        return self._rejected_count
