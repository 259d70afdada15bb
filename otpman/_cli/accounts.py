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

import logging
from typing import List, Optional, Tuple

import click

from otpkit.importer import ImportResult, calculate_all, import_accounts
from otpkit.keys import SecretKey
from otpkit.totp import Account

from ..records import RecordFileError, load_records
from ..settings import KeystoreError, StoreKeys
from .util import CliFail, click_group, click_parse_key, prompt_key

logger = logging.getLogger(__name__)


INVALID_SECRET = "[Invalid secret]"


@click_group()
@click.pass_context
def accounts(ctx):
    """
    Read OTP accounts from encrypted records.

    RECORDS is a JSON file holding a list of records, each an object with an "id"
    and the encrypted entry as base64 "content".

    Examples:

    \b
      List the accounts in records.json, remembering the key:
      $ otpman accounts list records.json --remember

    \b
      Generate the code for accounts matching 'github':
      $ otpman accounts code records.json github
    """
    ctx.obj["store_keys"] = StoreKeys()


click_records_argument = click.argument(
    "records_file", type=click.File("r"), metavar="RECORDS"
)


click_key_option = click.option(
    "-k",
    "--key",
    envvar="OTPMAN_KEY",
    callback=click_parse_key,
    help="the store key, as 64 hex characters or base64",
)


click_remember_option = click.option(
    "-r",
    "--remember",
    is_flag=True,
    help="remember the key on this machine",
)


def _get_key(ctx, key: Optional[SecretKey]) -> Tuple[SecretKey, bool]:
    """Returns the key to use, and whether it was remembered."""
    keys = ctx.obj["store_keys"]

    # Use key, if given as argument
    if key:
        logger.debug("Using provided key")
        return key, False

    # Use stored key, if available
    remembered = keys.get_store_key()
    if remembered is not None:
        logger.debug("Using remembered key")
        return remembered, True

    return prompt_key(), False


def _remember(ctx, key: SecretKey) -> None:
    try:
        ctx.obj["store_keys"].put_store_key(key)
    except KeystoreError:
        raise CliFail("Failed to remember key, the keyring is locked or unavailable.")
    click.echo("Key remembered.", err=True)


def _import(ctx, records_file, key, remember) -> ImportResult:
    try:
        records = load_records(records_file)
    except RecordFileError as e:
        raise CliFail(f"{e}.")
    key, remembered = _get_key(ctx, key)
    result = import_accounts(records, key, ctx.obj["decoder"])

    if result.all_failed:
        if remembered:
            logger.debug("Remembered key incorrect, deleting key")
            ctx.obj["store_keys"].forget_store_key()
        raise CliFail("No accounts could be read. The key may be incorrect.")

    if remember and not remembered:
        _remember(ctx, key)
    return result


def _report(result: ImportResult) -> None:
    if result.failures:
        click.echo(
            f"Read {len(result.accounts)} accounts, "
            f"{len(result.failures)} records skipped.",
            err=True,
        )


def _search(accounts: List[Account], query: str) -> List[Account]:
    hits = []
    for a in accounts:
        name = a.display_name
        if name == query:
            return [a]
        if query.lower() in name.lower():
            hits.append(a)
    return hits


def _error_multiple_hits(ctx, hits):
    click.echo("Error: Multiple matches, make the query more specific.", err=True)
    click.echo("", err=True)
    for account in hits:
        click.echo(account.display_name, err=True)
    ctx.exit(1)


@accounts.command("list")
@click.pass_context
@click_records_argument
@click_key_option
@click_remember_option
@click.option("-P", "--period", is_flag=True, help="display the period")
@click.option("-a", "--algorithm", is_flag=True, help="display the hash algorithm")
def list_accounts(ctx, records_file, key, remember, period, algorithm):
    """
    List all accounts.

    List all TOTP accounts that could be read from the records.
    """
    result = _import(ctx, records_file, key, remember)
    for account in sorted(result.accounts):
        click.echo(account.display_name, nl=False)
        if period:
            click.echo(f", {account.period}", nl=False)
        if algorithm:
            click.echo(f", {account.algorithm.name}", nl=False)
        click.echo()
    _report(result)


@accounts.command()
@click.pass_context
@click_records_argument
@click.argument("query", required=False, default="")
@click_key_option
@click_remember_option
@click.option(
    "-s",
    "--single",
    is_flag=True,
    help="ensure only a single match, and output only the code",
)
@click.option("-n", "--next", "show_next", is_flag=True, help="also show the next code")
def code(ctx, records_file, query, key, remember, single, show_next):
    """
    Generate codes.

    Generate current codes for the accounts read from the records.
    Provide a query string to match one or more specific accounts.
    """
    result = _import(ctx, records_file, key, remember)
    entries = calculate_all(result.accounts)
    hits = _search(sorted(entries.keys()), query)

    if single:
        if len(hits) > 1:
            _error_multiple_hits(ctx, hits)
        if not hits:
            raise CliFail("No matching account found.")
        generated = entries[hits[0]]
        if generated is None:
            raise CliFail("The account secret is not valid base32.")
        click.echo(generated.next if show_next else generated.current)
        return

    outputs = []
    for account in hits:
        generated = entries[account]
        if generated is None:
            outputs.append((account.display_name, INVALID_SECRET, ""))
            continue
        codestr = generated.current
        if show_next:
            codestr += f" {generated.next}"
        remaining = f"{generated.seconds_remaining}s"
        outputs.append((account.display_name, codestr, remaining))

    longest_name = max(len(n) for (n, c, r) in outputs) if outputs else 0
    longest_code = max(len(c) for (n, c, r) in outputs) if outputs else 0
    format_str = "{:<%d}  {:>%d}  {}" % (longest_name, longest_code)

    for name, codestr, remaining in outputs:
        click.echo(format_str.format(name, codestr, remaining).rstrip())
    _report(result)
