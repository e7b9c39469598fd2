"""
AirSpace Hand Tracking Module

Landmark containers, persistent hand tracks and gesture recognition.
The MediaPipe capture (hand_tracker) and Qt worker (worker) are imported
from their modules directly so the core runs without camera libraries.
"""
from .config import Config, ConfigError, load_config
from .landmarks import HandObservation
from .gesture_recognizer import GestureRecognizer, Gesture, HandState
from .track_assigner import TrackAssigner, HandTrack

__all__ = [
    'Config',
    'ConfigError',
    'load_config',
    'HandObservation',
    'GestureRecognizer',
    'Gesture',
    'HandState',
    'TrackAssigner',
    'HandTrack',
]
