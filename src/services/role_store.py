"""Role store - Persists the role allow-list between plugin loads"""

import json
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os

from utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ROLES)


class RoleStore:
    """
    JSON file holding the comma-separated role allow-list.

    Only the allow-list survives restarts; user assignments are
    process-lifetime. A missing or corrupt file reads as "nothing stored".

    File format:
        {"available_roles": "level01,level02,admin"}
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    async def load(self) -> Optional[str]:
        """Return the stored allow-list text, or None if nothing is stored"""
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
            data = json.loads(content)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            log.warn(f"Invalid role store {self.path}, ignoring", error=str(e))
            return None

        value = data.get("available_roles") if isinstance(data, dict) else None
        if not isinstance(value, str):
            return None

        log.debug("Loaded available roles", roles=value)
        return value

    async def save(self, available_roles: str) -> None:
        """Write the allow-list (creates parent directories)"""
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        async with aiofiles.open(self.path, "w", encoding="utf-8") as f:
            await f.write(json.dumps({"available_roles": available_roles}, indent=2))
        log.debug(f"Roles saved {self.path}", roles=available_roles)

    async def clear(self) -> None:
        """Remove the stored allow-list (idempotent)"""
        try:
            await aiofiles.os.remove(self.path)
            log.debug(f"Role store removed {self.path}")
        except FileNotFoundError:
            pass
