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

from .core import HASH_ALGORITHM, UriParseError

from urllib.parse import unquote, urlparse, parse_qs
from dataclasses import dataclass
from typing import Dict, Optional

import logging


logger = logging.getLogger(__name__)


DEFAULT_PERIOD = 30
DEFAULT_DIGITS = 6
DEFAULT_ALGORITHM = HASH_ALGORITHM.SHA1

SCHEME = "otpauth"
SUPPORTED_TYPE = "totp"


@dataclass(frozen=True)
class OtpParameters:
    """TOTP parameters from an otpauth:// URI.

    The secret is kept as the base32 text found in the URI.
    """

    name: str
    issuer: str
    secret: str
    period: int = DEFAULT_PERIOD
    digits: int = DEFAULT_DIGITS
    algorithm: HASH_ALGORITHM = DEFAULT_ALGORITHM

    def __repr__(self):
        return (
            f"OtpParameters(name={self.name!r}, issuer={self.issuer!r}, "
            f"period={self.period}, digits={self.digits}, "
            f"algorithm={self.algorithm.name})"
        )

    @classmethod
    def parse_uri(cls, uri: str) -> "OtpParameters":
        """Parse an otpauth://totp/LABEL?PARAMS URI.

        The issuer query parameter takes precedence over an issuer given as a prefix
        of the label. Unknown algorithms, and digits or period values that are not
        positive integers, fall back to their defaults.

        :raises UriParseError: If the URI is malformed, not TOTP, or has no secret.
        """
        try:
            parsed = urlparse(uri.strip())
        except ValueError as e:
            raise UriParseError(f"Malformed URI: {e}")
        if parsed.scheme != SCHEME:
            raise UriParseError("Invalid URI scheme")

        if not parsed.hostname:
            raise UriParseError("Missing OTP type")
        otp_type = parsed.hostname.lower()
        if otp_type != SUPPORTED_TYPE:
            raise UriParseError(f"Unsupported OTP type: {otp_type}")

        params = _parse_params(parsed.query)
        secret = params.get("secret")
        if not secret:
            raise UriParseError("Missing secret")

        label_issuer = ""
        name = unquote(parsed.path)[1:]  # Unquote and strip leading /
        if ":" in name:
            label_issuer, name = name.split(":", 1)

        return cls(
            name=name.strip(),
            issuer=params.get("issuer", label_issuer.strip()),
            secret=secret,
            period=_parse_positive(params.get("period"), DEFAULT_PERIOD, "period"),
            digits=_parse_positive(params.get("digits"), DEFAULT_DIGITS, "digits"),
            algorithm=_parse_algorithm(params.get("algorithm")),
        )


def _parse_params(query: str) -> Dict[str, str]:
    params: Dict[str, str] = {}
    for k, v in parse_qs(query).items():
        params.setdefault(k.lower(), v[0])
    return params


def _parse_positive(value: Optional[str], default: int, what: str) -> int:
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if parsed <= 0:
        logger.debug(f"Invalid {what} {value!r}, using default {default}")
        return default
    return parsed


def _parse_algorithm(value: Optional[str]) -> HASH_ALGORITHM:
    if value is None:
        return DEFAULT_ALGORITHM
    try:
        return HASH_ALGORITHM[value.upper()]
    except KeyError:
        logger.debug(f"Unknown algorithm {value!r}, using {DEFAULT_ALGORITHM.name}")
        return DEFAULT_ALGORITHM


def parse_otpauth_uri(uri: str) -> Optional[OtpParameters]:
    """Parse an otpauth:// URI, returning None if it can't be used."""
    try:
        return OtpParameters.parse_uri(uri)
    except UriParseError as e:
        logger.debug(f"Unusable OTP URI: {e}")
        return None
