"""Animation duration lookup from host animation metadata"""

import json
from typing import Optional

from host.host_interface import IHost
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RECEIVER)

DEFAULT_ANIMATION_DURATION = 2.0


class AnimationTiming:
    """
    Resolves how long an object's animation runs.

    The first metadata entry whose name contains the requested name
    (case-insensitive) wins. Any failure (host error, bad JSON, missing or
    non-positive duration) yields the default duration.
    """

    def __init__(self, host: IHost, default_duration: float = DEFAULT_ANIMATION_DURATION):
        self._host = host
        self.default_duration = default_duration

    async def duration_of(self, object_id: str, animation_name: str) -> float:
        """Duration in seconds"""
        try:
            raw = await self._host.get_animations(object_id)
            animations = json.loads(raw)
            duration = self._find(animations, animation_name)
        except Exception as e:
            log.debug("Animation lookup failed, using default",
                      object=object_id, animation=animation_name, error=str(e))
            return self.default_duration

        if duration is None:
            return self.default_duration
        return duration

    @staticmethod
    def _find(animations, animation_name: str) -> Optional[float]:
        if not isinstance(animations, list) or not animation_name:
            return None

        wanted = animation_name.lower()
        for anim in animations:
            if not isinstance(anim, dict):
                continue
            name = anim.get("name")
            if isinstance(name, str) and wanted in name.lower():
                duration = anim.get("duration")
                if isinstance(duration, (int, float)) and not isinstance(duration, bool) and duration > 0:
                    return float(duration)
                return None
        return None
