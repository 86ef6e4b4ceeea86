"""
Optional per-type checks of record data.

Parsing keeps rdata as opaque text, these helpers hand it to
dnspython afterwards and turn its complaints into warnings.
"""

from __future__ import annotations

import dns.exception
import dns.name
import dns.rdata
import dns.rdataclass
import dns.rdatatype

from zonescope.zone.models import Record, Zone


def _origin_name(origin: str) -> dns.name.Name | None:
    if not origin or not origin.endswith('.'):
        return None
    return dns.name.from_text(origin)


def check_record(record: Record) -> str | None:
    '''
    Parses the record data with dnspython, relative names inside
    it are taken relative to the record's own origin.

    Parameters
    ----------
    record : Record

    Returns
    -------
    str | None
        _A warning describing the problem, None when the rdata is valid_
    '''
    try:
        rdclass = dns.rdataclass.from_text(record.rclass)
        rdtype = dns.rdatatype.from_text(record.rtype)
        dns.rdata.from_text(
            rdclass,
            rdtype,
            record.rdata,
            origin=_origin_name(record.origin),
        )
    except dns.exception.DNSException as exc:
        return f'{record.name} {record.rtype}: {exc}'
    return None


def check_zone(zone: Zone) -> list[str]:
    warnings: list[str] = []
    for record in zone:
        if warning := check_record(record):
            warnings.append(warning)
    return warnings
