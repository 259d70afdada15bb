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

from .core import (
    InvalidSecretError,
    MissingIdentityError,
    RecordError,
    SchemaError,
    UnsupportedEntryError,
)
from .entry import EntryDecoder, SteamContent, TotpContent
from .keys import SecretKey
from .store import EncryptedRecord, decrypt
from .totp import Account, GeneratedCode, generate
from .uri import OtpParameters

from dataclasses import dataclass, field
from time import time
from typing import Dict, Iterable, List, Optional

import logging


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordFailure:
    record_id: str
    error: RecordError


@dataclass
class ImportResult:
    """The outcome of importing a batch of records."""

    accounts: List[Account] = field(default_factory=list)
    failures: List[RecordFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.accounts) + len(self.failures) + len(self.skipped)

    @property
    def all_failed(self) -> bool:
        """True if there were records, and none of them could be decrypted.

        This is what a wrong key looks like, since authentication fails per record.
        """
        return bool(self.failures) and not self.accounts and not self.skipped


def read_account(
    record: EncryptedRecord, key: SecretKey, decoder: EntryDecoder
) -> Optional[Account]:
    """Decrypt, decode and parse a single record.

    :return: The account, or None if the entry has no OTP content.
    :raises RecordError: If the record can't be turned into an account.
    """
    entry = decoder.decode(decrypt(record, key))
    content = entry.content

    if content is None:
        return None
    if isinstance(content, SteamContent):
        raise UnsupportedEntryError("Steam entries are not supported")
    if not isinstance(content, TotpContent):
        raise SchemaError(f"Unknown entry content: {type(content).__name__}")

    params = OtpParameters.parse_uri(content.uri)
    account_id = entry.metadata.id or record.id
    if not account_id:
        raise MissingIdentityError("Entry has no id")
    return Account.from_parameters(account_id, params)


def import_accounts(
    records: Iterable[EncryptedRecord],
    key: SecretKey,
    decoder: Optional[EntryDecoder] = None,
) -> ImportResult:
    """Import a batch of records.

    A record that fails is reported in the result, and the batch continues.

    :param records: The encrypted records to read.
    :param key: The validated store key.
    :param decoder: The entry decoder to use, a new one is created if omitted.
    """
    key = SecretKey(key)  # No record is processed without a valid key
    decoder = decoder or EntryDecoder()
    result = ImportResult()
    for record in records:
        try:
            account = read_account(record, key, decoder)
        except RecordError as e:
            logger.warning(f"Skipping record {record.id!r}: {e}")
            result.failures.append(RecordFailure(record.id, e))
            continue

        if account is None:
            logger.debug(f"Record {record.id!r} has no OTP content")
            result.skipped.append(record.id)
        else:
            result.accounts.append(account)

    logger.info(
        f"Imported {len(result.accounts)} of {result.total} records, "
        f"{len(result.failures)} failed, {len(result.skipped)} without content"
    )
    if result.all_failed:
        logger.warning("No record could be read, the key may be incorrect")
    return result


def calculate_all(
    accounts: Iterable[Account], timestamp: Optional[int] = None
) -> Dict[Account, Optional[GeneratedCode]]:
    """Generate codes for several accounts at the same instant.

    Accounts with an invalid secret map to None.
    """
    timestamp = int(time() if timestamp is None else timestamp)
    entries: Dict[Account, Optional[GeneratedCode]] = {}
    for account in accounts:
        try:
            entries[account] = generate(account, timestamp)
        except InvalidSecretError as e:
            logger.error(f"Unable to generate code for {account.id!r}: {e}")
            entries[account] = None
    return entries
