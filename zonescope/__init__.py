from .zone import (
    ConcurrentZoneParser,
    Record,
    Zone,
    ZoneFileError,
    ZoneParser,
    ZoneReadError,
    ZoneSyntaxError,
    parse_ttl,
    parse_zone,
    parse_zone_text,
    parse_zones,
)
from .core.options import ParserOptions, load_options

__all__ = [
    "ParserOptions",
    "load_options",
    "ConcurrentZoneParser",
    "Record",
    "Zone",
    "ZoneFileError",
    "ZoneParser",
    "ZoneReadError",
    "ZoneSyntaxError",
    "parse_ttl",
    "parse_zone",
    "parse_zone_text",
    "parse_zones",
]
