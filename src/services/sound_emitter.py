"""
Sound Emitter - Local playback plus relay broadcast

Rule shared by every receiver mode:
- local audio on:  play at the receiver, stop after the duration, broadcast relaySound
- local audio off: broadcast relaySound only
- empty sound:     nothing
"""

import asyncio
from typing import Optional

from host.host_interface import IHost
from lifecycle.task_registry import create_tracked_task, TaskCategory
from models.domain import Position
from models.messages import RelaySoundMessage
from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.RECEIVER)


class SoundEmitter:

    def __init__(self, host: IHost):
        self._host = host

    async def emit(
        self,
        source_id: str,
        sound: Optional[str],
        volume: float,
        duration: float,
        position: Position,
        local_audio: bool = True,
        owner: Optional[str] = None,
    ) -> Optional[str]:
        """
        Emit a sound for `duration` seconds

        Returns:
            Local audio id, or None when nothing was played locally
        """
        if not sound or not sound.strip():
            return None

        audio_id = None
        if local_audio:
            audio_id = await self.play_for(sound, volume, duration, position, owner=owner)

        relay = RelaySoundMessage(
            source_id=source_id,
            sound_file=sound,
            volume=volume,
            duration_ms=max(1, round(duration * 1000)),
        )
        await self._host.send_message(relay.to_payload())

        log.debug("Sound emitted", source=source_id, sound=sound, local=local_audio,
                  duration=f"{duration:.2f}s")
        return audio_id

    async def play_for(self, sound: str, volume: float, duration: float, position: Position,
                       owner: Optional[str] = None) -> str:
        """Play locally and stop after `duration` seconds (no relay)"""
        audio_id = await self._host.play_sound(self._host.absolute_path(sound), volume, position)
        create_tracked_task(
            self._stop_after(audio_id, duration),
            category=TaskCategory.AUDIO,
            description=f"Stop {audio_id} after {duration:.2f}s",
            owner=owner,
        )
        return audio_id

    async def _stop_after(self, audio_id: str, duration: float) -> None:
        # Unload cancels this task; the sound is stopped either way
        try:
            await asyncio.sleep(duration)
        finally:
            await self._host.stop_sound(audio_id)
