"""
Models package - Data models for the Asset Link plugin
"""

from .enums import (
    ComponentKind,
    InputMode,
    AnimationMode,
    TransitionMode,
    Direction,
    ReceiverPhase,
    LogLevel,
    LogCategory,
)

__all__ = [
    'ComponentKind',
    'InputMode',
    'AnimationMode',
    'TransitionMode',
    'Direction',
    'ReceiverPhase',
    'LogLevel',
    'LogCategory',
]
