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

from otpkit.core import InvalidSecretError
from otpkit.totp import Account, generate
from otpkit.uri import OtpParameters

from .util import CliFail, click_callback, click_group, pretty_print

logger = logging.getLogger(__name__)


@click_callback()
def click_parse_uri(ctx, param, val):
    return OtpParameters.parse_uri(val)


click_uri_argument = click.argument("params", metavar="URI", callback=click_parse_uri)


@click_group()
def uri():
    """
    Work with otpauth:// URIs directly.

    Examples:

    \b
      Show the parameters of a URI:
      $ otpman uri parse 'otpauth://totp/Example:alice?secret=JBSWY3DPEHPK3PXP'
    """


@uri.command()
@click_uri_argument
def parse(params):
    """
    Show the parameters of a TOTP URI.
    """
    data = {
        "Name": params.name,
        "Issuer": params.issuer,
        "Algorithm": params.algorithm,
        "Digits": params.digits,
        "Period": params.period,
    }
    click.echo("\n".join(pretty_print(data)))


@uri.command()
@click_uri_argument
@click.option(
    "-t",
    "--timestamp",
    type=int,
    default=None,
    help="generate the code for a Unix time instead of now",
)
@click.option("-n", "--next", "show_next", is_flag=True, help="also show the next code")
def code(params, timestamp, show_next):
    """
    Generate a code from a TOTP URI.
    """
    account = Account.from_parameters("uri", params)
    try:
        generated = generate(account, timestamp)
    except InvalidSecretError as e:
        raise CliFail(f"{e}.")

    click.echo(generated.current)
    if show_next:
        click.echo(generated.next)
