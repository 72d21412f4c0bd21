import asyncio
import logging
import re
from enum import Enum
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)


USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$")
MIN_LENGTH = 3
MAX_LENGTH = 30
DEBOUNCE_SECONDS = 0.5

# Returns the owner id holding the username, or None when it is free.
OwnerLookup = Callable[[str], str | None]


class UsernameStatus(str, Enum):
    IDLE = "idle"
    CHECKING = "checking"
    AVAILABLE = "available"
    TAKEN = "taken"
    INVALID = "invalid"


def normalize_username(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9-]", "", value or "").lower()


def validate_username(value: str) -> bool:
    return (
        MIN_LENGTH <= len(value) <= MAX_LENGTH
        and USERNAME_PATTERN.match(value) is not None
        and "--" not in value
    )


def check_username_availability(
    value: str,
    lookup_owner: OwnerLookup,
    current_user_id: str | None = None,
) -> UsernameStatus:
    if not value:
        return UsernameStatus.IDLE
    if not validate_username(value):
        return UsernameStatus.INVALID

    try:
        owner_id = lookup_owner(value.lower())
    except Exception:
        logger.exception("Username lookup failed for username=%s", value)
        return UsernameStatus.IDLE

    if owner_id is None:
        return UsernameStatus.AVAILABLE
    if current_user_id and owner_id == current_user_id:
        return UsernameStatus.AVAILABLE
    return UsernameStatus.TAKEN


class UsernameAvailabilityChecker:
    """Debounced availability state machine for interactive input.

    Every call to ``submit`` cancels the pending check and schedules a new one
    after ``delay`` seconds, so only the last keystroke of a burst reaches the
    lookup. ``status`` moves ``idle -> checking -> available | taken | invalid``
    and falls back to ``idle`` when the lookup fails.
    """

    def __init__(
        self,
        lookup_owner: Callable[[str], Awaitable[str | None]],
        current_user_id: str | None = None,
        delay: float = DEBOUNCE_SECONDS,
    ) -> None:
        self._lookup_owner = lookup_owner
        self.current_user_id = current_user_id
        self.delay = delay
        self.status = UsernameStatus.IDLE
        self._pending: asyncio.Task | None = None

    def submit(self, raw_value: str) -> asyncio.Task | None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

        value = normalize_username(raw_value)
        if not value:
            self.status = UsernameStatus.IDLE
            return None

        self._pending = asyncio.get_running_loop().create_task(self._check_later(value))
        return self._pending

    async def _check_later(self, value: str) -> UsernameStatus:
        await asyncio.sleep(self.delay)
        return await self.check(value)

    async def check(self, value: str) -> UsernameStatus:
        if not validate_username(value):
            self.status = UsernameStatus.INVALID
            return self.status

        self.status = UsernameStatus.CHECKING
        try:
            owner_id = await self._lookup_owner(value.lower())
        except Exception:
            logger.exception("Username lookup failed for username=%s", value)
            self.status = UsernameStatus.IDLE
            return self.status

        if owner_id is None or (self.current_user_id and owner_id == self.current_user_id):
            self.status = UsernameStatus.AVAILABLE
        else:
            self.status = UsernameStatus.TAKEN
        return self.status
