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

from otpkit.store import EncryptedRecord

from base64 import b64decode, b64encode
from typing import IO, List

import binascii
import json
import logging


logger = logging.getLogger(__name__)


class RecordFileError(ValueError):
    """The records file could not be read."""


def load_records(fobj: IO) -> List[EncryptedRecord]:
    """Read encrypted records from a JSON file.

    The file holds a list of objects with an "id" string, and the encrypted blob
    as base64 in "content".
    """
    try:
        data = json.load(fobj)
    except ValueError as e:
        raise RecordFileError(f"Invalid JSON in records file: {e}")

    if not isinstance(data, list):
        raise RecordFileError("Records file must contain a list of records")

    records = []
    for i, item in enumerate(data):
        if not isinstance(item, dict) or not isinstance(item.get("content"), str):
            raise RecordFileError(f"Record {i} has no content")
        try:
            blob = b64decode(item["content"], validate=True)
        except binascii.Error:
            raise RecordFileError(f"Record {i} content is not valid base64")
        records.append(EncryptedRecord(str(item.get("id") or ""), blob))

    logger.debug(f"Read {len(records)} records")
    return records


def dump_records(records: List[EncryptedRecord], fobj: IO) -> None:
    json.dump(
        [{"id": r.id, "content": b64encode(r.blob).decode()} for r in records],
        fobj,
        indent=2,
    )
