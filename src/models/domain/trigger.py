"""Trigger domain models"""

from dataclasses import dataclass
from models.enums import InputMode


@dataclass(frozen=True)
class TriggerConfig:
    """Immutable trigger configuration parsed from host fields"""
    input_mode: InputMode = InputMode.ON_CLICK
    proximity_distance: float = 2.0
    required_user_count: int = 2
    action_id: str = ""
    admin_only: bool = False
    role_restricted: bool = False
    required_role: str = ""
    assign_role: str = ""


@dataclass
class TriggerState:
    """Mutable trigger runtime state"""
    input_mode: InputMode = InputMode.ON_CLICK
    triggered: bool = False   # One-shot flag for proximity modes
    fire_count: int = 0
