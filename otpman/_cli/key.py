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

import click

from otpkit.core import InvalidKeyError
from otpkit.keys import is_hex_key, validate_key

from ..settings import StoreKeys
from .util import CliFail, click_group, click_prompt

logger = logging.getLogger(__name__)


@click_group()
def key():
    """Check and manage the store key."""


@key.command()
@click.argument("value", metavar="KEY", required=False)
def check(value):
    """
    Check that a store key is valid.

    The key must be 32 bytes, given as 64 hex characters or as base64.
    If KEY is omitted, it is read from a prompt.
    """
    if value is None:
        value = click_prompt("Enter the store key", hide_input=True)
    try:
        validate_key(value)
    except InvalidKeyError as e:
        raise CliFail(f"{e}.")

    key_format = "hex" if is_hex_key(value) else "base64"
    click.echo(f"Valid store key ({key_format}).")


@key.command()
def forget():
    """
    Forget a remembered store key.
    """
    if StoreKeys().forget_store_key():
        click.echo("Remembered key deleted.")
    else:
        click.echo("No key is remembered.")
