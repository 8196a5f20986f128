"""Secondary audio relay domain model"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RelayConfig:
    """Object id whose relayed sound this output plays"""
    source_id: str = ""
