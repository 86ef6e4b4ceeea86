from .core import (
    ConcurrentZoneParser,
    ZoneParser,
    parse_zone,
    parse_zone_text,
    parse_zones,
)
from zonescope.errors import ZoneFileError, ZoneReadError, ZoneSyntaxError
from .models import Record, Zone
from .ttl import parse_ttl

__all__ = [
    "ConcurrentZoneParser",
    "ZoneParser",
    "parse_zone",
    "parse_zone_text",
    "parse_zones",
    "ZoneFileError",
    "ZoneReadError",
    "ZoneSyntaxError",
    "Record",
    "Zone",
    "parse_ttl",
]
