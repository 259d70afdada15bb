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

from .core import SchemaError
from .logging import LOG_LEVEL

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import DecodeError
from dataclasses import dataclass, field
from typing import Optional, Union

import logging


logger = logging.getLogger(__name__)


_PACKAGE = "authenticator"
_FIELD = descriptor_pb2.FieldDescriptorProto

# Message name -> [(number, field name, message type or None for string)]
_SCHEMA = {
    "AuthenticatorEntry": [
        (1, "metadata", "AuthenticatorEntryMetadata"),
        (2, "content", "AuthenticatorEntryContent"),
    ],
    "AuthenticatorEntryMetadata": [
        (1, "name", None),
        (2, "note", None),
        (3, "id", None),
    ],
    "AuthenticatorEntryContent": [
        (1, "totp", "AuthenticatorEntryContentTotp"),
        (2, "steam", "AuthenticatorEntryContentSteam"),
    ],
    "AuthenticatorEntryContentTotp": [(1, "uri", None)],
    "AuthenticatorEntryContentSteam": [(1, "secret", None)],
}

# Messages whose fields are all members of a single oneof of the given name
_ONEOFS = {"AuthenticatorEntryContent": "content"}


@dataclass(frozen=True)
class Metadata:
    name: str = ""
    note: str = ""
    id: str = ""


@dataclass(frozen=True)
class TotpContent:
    uri: str

    def __repr__(self):
        return "TotpContent(uri=<redacted>)"


@dataclass(frozen=True)
class SteamContent:
    secret: str

    def __repr__(self):
        return "SteamContent(secret=<redacted>)"


Content = Union[TotpContent, SteamContent]


@dataclass(frozen=True)
class DecodedEntry:
    """An authenticator entry.

    The content is either a TOTP URI, a Steam secret, or None if the entry carries
    no OTP payload.
    """

    metadata: Metadata = field(default_factory=Metadata)
    content: Optional[Content] = None


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    fd = descriptor_pb2.FileDescriptorProto(
        name="authenticator_entry.proto", package=_PACKAGE, syntax="proto3"
    )
    for name, fields in _SCHEMA.items():
        message = fd.message_type.add(name=name)
        oneof = _ONEOFS.get(name)
        if oneof:
            message.oneof_decl.add(name=oneof)
        for number, field_name, type_name in fields:
            f = message.field.add(
                name=field_name, number=number, label=_FIELD.LABEL_OPTIONAL
            )
            if type_name:
                f.type = _FIELD.TYPE_MESSAGE
                f.type_name = f".{_PACKAGE}.{type_name}"
            else:
                f.type = _FIELD.TYPE_STRING
            if oneof:
                f.oneof_index = 0
    return fd


class EntryDecoder:
    """Decoder for the binary entry schema.

    Each instance owns a private descriptor pool, so decoders never share state and
    do not touch the global protobuf registry. Construct one and pass it to whatever
    needs to decode entries.
    """

    def __init__(self):
        self._pool = descriptor_pool.DescriptorPool()
        self._pool.AddSerializedFile(_build_file_descriptor().SerializeToString())
        self._entry_class = message_factory.GetMessageClass(
            self._pool.FindMessageTypeByName(f"{_PACKAGE}.AuthenticatorEntry")
        )

    def decode(self, plaintext: bytes) -> DecodedEntry:
        """Decode a plaintext entry.

        Missing fields decode as empty strings, and an entry without content is
        valid.

        :param plaintext: A serialized AuthenticatorEntry.
        :raises SchemaError: If the data is not a well-formed entry.
        """
        try:
            message = self._entry_class.FromString(plaintext)
        except (DecodeError, UnicodeDecodeError) as e:
            raise SchemaError(f"Malformed entry: {e}")

        metadata = Metadata(
            name=message.metadata.name,
            note=message.metadata.note,
            id=message.metadata.id,
        )

        which = message.content.WhichOneof("content")
        content: Optional[Content]
        if which == "totp":
            content = TotpContent(message.content.totp.uri)
        elif which == "steam":
            content = SteamContent(message.content.steam.secret)
        else:
            content = None

        logger.log(
            LOG_LEVEL.TRAFFIC,
            "Decoded entry id=%r name=%r content=%s",
            metadata.id,
            metadata.name,
            which,
        )
        return DecodedEntry(metadata, content)

    def encode(self, entry: DecodedEntry) -> bytes:
        """Serialize an entry to the binary schema."""
        message = self._entry_class()
        md = entry.metadata
        if md.name or md.note or md.id:
            message.metadata.name = md.name
            message.metadata.note = md.note
            message.metadata.id = md.id

        content = entry.content
        if isinstance(content, TotpContent):
            message.content.totp.SetInParent()
            message.content.totp.uri = content.uri
        elif isinstance(content, SteamContent):
            message.content.steam.SetInParent()
            message.content.steam.secret = content.secret
        elif content is not None:
            raise TypeError(f"Unsupported content type: {type(content).__name__}")

        return message.SerializeToString()
