"""
Asset Link components (one instance per host object)
"""

from .base import BaseComponent, ComponentContext
from .trigger import TriggerComponent
from .receiver import ReceiverComponent
from .relay import RelayComponent

__all__ = [
    'BaseComponent',
    'ComponentContext',
    'TriggerComponent',
    'ReceiverComponent',
    'RelayComponent',
]
