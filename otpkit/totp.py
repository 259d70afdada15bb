# Copyright (c) 2026 Yubico AB
# All rights reserved.
#
#   Redistribution and use in source and binary forms, with or
#   without modification, are permitted provided that the following
#   conditions are met:
#
#    1. Redistributions of source code must retain the above copyright
#       notice, this list of conditions and the following disclaimer.
#    2. Redistributions in binary form must reproduce the above
#       copyright notice, this list of conditions and the following
#       disclaimer in the documentation and/or other materials provided
#       with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS
# "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT
# LIMITED TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS
# FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE
# COPYRIGHT HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT,
# INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING,
# BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES;
# LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER
# CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN
# ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

from .core import HASH_ALGORITHM, InvalidSecretError, bytes2int
from .uri import OtpParameters, DEFAULT_PERIOD, DEFAULT_DIGITS, DEFAULT_ALGORITHM

from base64 import b32decode
from dataclasses import dataclass, field
from functools import total_ordering
from time import time
from typing import Optional

import hmac
import struct


def parse_b32_key(key: str) -> bytes:
    """Decode an RFC 4648 base32 secret.

    Case and whitespace are ignored, and padding is optional.

    :raises InvalidSecretError: If the secret is not valid base32.
    """
    key = "".join(key.split()).upper().rstrip("=")
    key += "=" * (-len(key) % 8)  # Support unpadded
    try:
        return b32decode(key)
    except ValueError as e:  # binascii.Error, or non-ASCII input
        raise InvalidSecretError(f"Invalid base32 secret: {e}")


@total_ordering
@dataclass(order=False, frozen=True)
class Account:
    """A TOTP account recovered from the store."""

    id: str
    name: str
    issuer: str
    secret: str = field(repr=False)
    period: int = DEFAULT_PERIOD
    digits: int = DEFAULT_DIGITS
    algorithm: HASH_ALGORITHM = DEFAULT_ALGORITHM

    def __post_init__(self):
        if self.period <= 0:
            raise ValueError("Period must be a positive integer")
        if self.digits <= 0:
            raise ValueError("Digits must be a positive integer")

    def __lt__(self, other):
        a = ((self.issuer or self.name).lower(), self.name.lower())
        b = ((other.issuer or other.name).lower(), other.name.lower())
        return a < b

    @property
    def display_name(self) -> str:
        return f"{self.issuer}:{self.name}" if self.issuer else self.name

    @classmethod
    def from_parameters(cls, account_id: str, params: OtpParameters) -> "Account":
        return cls(
            id=account_id,
            name=params.name,
            issuer=params.issuer,
            secret=params.secret,
            period=params.period,
            digits=params.digits,
            algorithm=params.algorithm,
        )


@dataclass(frozen=True)
class GeneratedCode:
    current: str
    next: str
    seconds_remaining: int


def _get_challenge(time_step: int) -> bytes:
    return struct.pack(">Q", time_step)


def format_code(mac: bytes, digits: int = DEFAULT_DIGITS) -> str:
    """Dynamically truncate an HMAC to a decimal code (RFC 4226, 5.3)."""
    offset = mac[-1] & 0x0F
    code = bytes2int(mac[offset : offset + 4]) & 0x7FFFFFFF
    return str(code % 10**digits).rjust(digits, "0")


def calculate_code(
    secret: bytes, time_step: int, algorithm: HASH_ALGORITHM, digits: int
) -> str:
    mac = hmac.new(secret, _get_challenge(time_step), algorithm.name.lower()).digest()
    return format_code(mac, digits)


def generate(account: Account, timestamp: Optional[int] = None) -> GeneratedCode:
    """Generate the current and next code for an account.

    The next code is calculated from the time step following the current one.

    :param account: The account to generate codes for.
    :param timestamp: Unix time in seconds, the current time if omitted.
    :raises InvalidSecretError: If the account secret is not valid base32.
    """
    timestamp = int(time() if timestamp is None else timestamp)
    if timestamp < 0:
        raise ValueError("Timestamp must not be negative")

    try:
        secret = parse_b32_key(account.secret)
    except InvalidSecretError as e:
        raise InvalidSecretError(str(e), account.id)

    time_step = timestamp // account.period
    return GeneratedCode(
        current=calculate_code(secret, time_step, account.algorithm, account.digits),
        next=calculate_code(secret, time_step + 1, account.algorithm, account.digits),
        seconds_remaining=account.period - timestamp % account.period,
    )
