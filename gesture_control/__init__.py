"""
Hand gesture debouncing and classification for a touchless game controller.

Turns per-frame MediaPipe hand landmarks into confirmed "right", "left"
and "rotate" gesture events.
"""

__version__ = "1.0.0"
