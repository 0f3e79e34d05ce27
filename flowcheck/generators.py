"""Named synthetic-data generators for request templates (``#{name}``)."""

from __future__ import annotations

import random
import time
import uuid as uuid_lib
from datetime import datetime, timedelta
from functools import lru_cache
from typing import Callable, Optional

from faker import Faker

from .exceptions import UnknownGeneratorError


PHONE_PREFIXES = (
    "134", "135", "136", "137", "138", "139", "150", "151", "152", "157",
    "158", "159", "130", "131", "132", "155", "156", "133", "153",
)

PROVINCE_CODES = (
    "11", "12", "13", "14", "15", "21", "22", "23", "31", "32", "33", "34",
    "35", "36", "37", "41", "42", "43", "44", "45", "46", "50", "51", "52",
    "53", "54", "61", "62", "63", "64", "65", "71", "81", "82",
)

ID_CARD_WEIGHTS = (7, 9, 10, 5, 8, 4, 2, 1, 6, 3, 7, 9, 10, 5, 8, 4, 2)
ID_CARD_CHECK_CODES = ("1", "0", "x", "9", "8", "7", "6", "5", "4", "3", "2")

# The registry format has no letter N; character values are positions in this string.
ORG_CODE_ALPHABET = "0123456789ABCDEFGHIJKLMOPQRSTUVWXYZ"
ORG_CODE_WEIGHTS = (3, 7, 9, 10, 5, 8, 4, 2)


def id_card_check_digit(first17: str) -> str:
    """Mod-11 check character for the first 17 digits of a resident ID number."""
    if len(first17) != 17 or not first17.isdigit():
        raise ValueError(f"Expected 17 digits, got '{first17}'")
    total = sum(int(digit) * weight for digit, weight in zip(first17, ID_CARD_WEIGHTS))
    return ID_CARD_CHECK_CODES[total % 11]


def org_code_check_char(body: str) -> str:
    """Mod-11 check character for an 8-character organization code body."""
    if len(body) != len(ORG_CODE_WEIGHTS):
        raise ValueError(f"Expected {len(ORG_CODE_WEIGHTS)} characters, got '{body}'")

    parity = 0
    for char, weight in zip(body, ORG_CODE_WEIGHTS):
        position = ORG_CODE_ALPHABET.find(char)
        if position < 0:
            raise ValueError(f"Character '{char}' is not allowed in an organization code")
        parity += weight * position

    check = 11 - parity % 11
    if check == 10:
        return "X"
    if check == 11:
        return "0"
    return str(check)


def mobile(rng: random.Random = random) -> str:
    """Random CN mobile number: table prefix plus two 4-digit groups."""
    prefix = rng.choice(PHONE_PREFIXES)
    second = str(rng.randint(1, 888) + 10000)[1:]
    third = str(rng.randint(1, 9100) + 10000)[1:]
    return prefix + second + third


def id_card(rng: random.Random = random, today: Optional[datetime] = None) -> str:
    """Random 18-character resident ID number for someone aged 20 to 50."""
    today = today or datetime.now()
    province = rng.choice(PROVINCE_CODES)
    city = f"{rng.randint(1, 18):02d}"
    county = f"{rng.randint(1, 28):02d}"
    birth = today - timedelta(days=365 * 20 + rng.randrange(365 * 30))
    sequence = "".join(str(rng.randrange(10)) for _ in range(3))

    first17 = province + city + county + birth.strftime("%Y%m%d") + sequence
    return first17 + id_card_check_digit(first17)


def org_code(rng: random.Random = random) -> str:
    """Random organization code, ``XXXXXXXX-C``."""
    body = "".join(rng.choice(ORG_CODE_ALPHABET) for _ in range(len(ORG_CODE_WEIGHTS)))
    return f"{body}-{org_code_check_char(body)}"


def now() -> str:
    """Current local time as ``yyyyMMddHHmmssSSS``."""
    current = datetime.now()
    return current.strftime("%Y%m%d%H%M%S") + f"{current.microsecond // 1000:03d}"


def timestamp() -> str:
    """Epoch milliseconds (13 digits)."""
    return str(int(time.time() * 1000))


def uuid() -> str:
    return str(uuid_lib.uuid4())


@lru_cache(maxsize=None)
def _faker(locale: str) -> Faker:
    return Faker(locale)


def chinese_name() -> str:
    return _faker("zh_CN").name()


def email() -> str:
    return _faker("en_US").email()


def username() -> str:
    return _faker("en_US").user_name()


DEFAULT_GENERATORS: dict[str, Callable[[], str]] = {
    "mobile": mobile,
    "idCard": id_card,
    "orgCode": org_code,
    "now": now,
    "timestamp": timestamp,
    "uuid": uuid,
    "name": chinese_name,
    "email": email,
    "username": username,
}


class GeneratorRegistry:
    """Maps generator names to zero-argument functions returning fresh strings."""

    def __init__(self, generators: Optional[dict[str, Callable[[], str]]] = None):
        self._generators: dict[str, Callable[[], str]] = dict(
            DEFAULT_GENERATORS if generators is None else generators
        )

    def register(self, name: str, func: Callable[[], str]) -> Callable[[], str]:
        self._generators[name] = func
        return func

    def generate(self, name: str) -> str:
        func = self._generators.get(name)
        if func is None:
            raise UnknownGeneratorError(name)
        return str(func())

    def names(self) -> list[str]:
        return sorted(self._generators)

    def __contains__(self, name: str) -> bool:
        return name in self._generators
