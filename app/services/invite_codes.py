"""Invite code generation."""

import random
import string

from app.core.config import settings
from app.core.exceptions import ServiceError
from app.services.data_service import DataService

BASE36_DIGITS = string.digits + string.ascii_uppercase

_system_random = random.SystemRandom()


def generate_code(length: int | None = None, rng: random.Random | None = None) -> str:
    """
    Generate an invite code.

    The code is the first ``length`` base-36 digits after the point of a
    uniform random fraction, uppercased.

    Args:
        length: Number of characters (defaults to INVITE_CODE_LENGTH)
        rng: Random source, mainly for tests

    Returns:
        Code made of 0-9 and A-Z
    """
    length = length or settings.INVITE_CODE_LENGTH
    fraction = (rng or _system_random).random()
    digits = []
    for _ in range(length):
        fraction *= 36
        digit = int(fraction)
        digits.append(BASE36_DIGITS[digit])
        fraction -= digit
    return "".join(digits)


async def generate_unique_code(
    data: DataService,
    max_attempts: int | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Generate a code no existing league uses.

    With INVITE_CODE_CHECK_UNIQUE disabled the first code is returned as-is
    and collisions are left to the store.
    """
    if not settings.INVITE_CODE_CHECK_UNIQUE:
        return generate_code(rng=rng)

    attempts = max_attempts or settings.INVITE_CODE_MAX_ATTEMPTS
    for _ in range(attempts):
        code = generate_code(rng=rng)
        taken = await data.select_maybe_single("leagues", "id", code=code)
        if taken is None:
            return code
    raise ServiceError("No se pudo generar un código de liga único")
