"""Protocol Buffers schema of the publisher server's channel responses.

The schema is compiled at import time from a ``FileDescriptorProto`` into
a private descriptor pool, which yields the same message classes a
generated ``_pb2`` module would.
"""

from __future__ import annotations

from enum import IntEnum

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

_PACKAGE = "publishers_pb"
_FIELD = descriptor_pb2.FieldDescriptorProto


class WalletConnectedState(IntEnum):
    NO_VERIFICATION = 0
    UPHOLD_ACCOUNT_KYC = 1
    UPHOLD_ACCOUNT_NO_KYC = 2


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    *,
    repeated: bool = False,
    type_name: str | None = None,
) -> None:
    field = message.field.add(
        name=name,
        number=number,
        type=field_type,
        label=_FIELD.LABEL_REPEATED if repeated else _FIELD.LABEL_OPTIONAL,
    )
    if type_name is not None:
        field.type_name = f".{_PACKAGE}.{type_name}"


def _build_file() -> descriptor_pb2.FileDescriptorProto:
    file = descriptor_pb2.FileDescriptorProto(
        name="publisher_directory/channel_response.proto",
        package=_PACKAGE,
        syntax="proto3",
    )

    state = file.enum_type.add(name="WalletConnectedState")
    for member in WalletConnectedState:
        state.value.add(name=member.name, number=member.value)

    links = file.message_type.add(name="SocialLinks")
    _add_field(links, "youtube", 1, _FIELD.TYPE_STRING)
    _add_field(links, "twitter", 2, _FIELD.TYPE_STRING)
    _add_field(links, "twitch", 3, _FIELD.TYPE_STRING)

    banner = file.message_type.add(name="SiteBannerDetails")
    _add_field(banner, "title", 1, _FIELD.TYPE_STRING)
    _add_field(banner, "description", 2, _FIELD.TYPE_STRING)
    _add_field(banner, "background_url", 3, _FIELD.TYPE_STRING)
    _add_field(banner, "logo_url", 4, _FIELD.TYPE_STRING)
    _add_field(banner, "donation_amounts", 5, _FIELD.TYPE_DOUBLE, repeated=True)
    _add_field(
        banner, "social_links", 6, _FIELD.TYPE_MESSAGE, type_name="SocialLinks"
    )

    entry = file.message_type.add(name="ChannelResponse")
    _add_field(entry, "channel_identifier", 1, _FIELD.TYPE_STRING)
    _add_field(
        entry,
        "wallet_connected_state",
        2,
        _FIELD.TYPE_ENUM,
        type_name="WalletConnectedState",
    )
    _add_field(entry, "wallet_address", 3, _FIELD.TYPE_STRING)
    _add_field(
        entry,
        "site_banner_details",
        4,
        _FIELD.TYPE_MESSAGE,
        type_name="SiteBannerDetails",
    )

    response_list = file.message_type.add(name="ChannelResponseList")
    _add_field(
        response_list,
        "channel_responses",
        1,
        _FIELD.TYPE_MESSAGE,
        repeated=True,
        type_name="ChannelResponse",
    )
    return file


_POOL = descriptor_pool.DescriptorPool()
_POOL.AddSerializedFile(_build_file().SerializeToString())


def _message_class(name: str) -> type:
    return message_factory.GetMessageClass(
        _POOL.FindMessageTypeByName(f"{_PACKAGE}.{name}")
    )


SocialLinks = _message_class("SocialLinks")
SiteBannerDetails = _message_class("SiteBannerDetails")
ChannelResponse = _message_class("ChannelResponse")
ChannelResponseList = _message_class("ChannelResponseList")
