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

from otpkit.logging import LOG_LEVEL
from typing import Optional
import logging


logging.addLevelName(LOG_LEVEL.TRAFFIC, LOG_LEVEL.TRAFFIC.name)
logger = logging.getLogger(__name__)


LOG_FORMAT = (
    "%(levelname)s %(asctime)s.%(msecs)d [%(name)s.%(funcName)s:%(lineno)d] "
    "%(message)s"
)

# Most verbose first
_EXPOSED_DATA = (
    (LOG_LEVEL.TRAFFIC, "account names, notes and entry ids"),
    (LOG_LEVEL.DEBUG, "record ids and account ids"),
)


def sensitivity_warning(level: LOG_LEVEL) -> Optional[str]:
    """Return a boxed warning if the level logs personal data, else None."""
    for threshold, exposed in _EXPOSED_DATA:
        if level <= threshold:
            text = f"WARNING: {level.name} logging includes {exposed}!"
            bar = "#" * (len(text) + 4)
            return "\n".join(["", bar, f"# {text} #", bar])
    return None


def set_log_level(level: LOG_LEVEL):
    logging.getLogger().setLevel(level)
    logger.info(f"Logging at level: {level.name}")

    warning = sensitivity_warning(level)
    if warning:
        logger.warning(warning)


def init_logging(log_level: LOG_LEVEL, log_file: Optional[str] = None):
    logging.basicConfig(
        force=log_file is None,  # Replace the default handler when logging to stderr
        datefmt="%H:%M:%S",
        filename=log_file,
        format=LOG_FORMAT,
    )
    set_log_level(log_level)
