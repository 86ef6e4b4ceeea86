import asyncio
import dataclasses
import logging

import pytest

from zonescope.core import fs_utils
from zonescope.core.options import ParserOptions
from zonescope.errors import ZoneReadError, ZoneSyntaxError
from zonescope.zone import Record, Zone, parse_zone, parse_zone_text, parse_zones


def test_basic_zone(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        $TTL 3600
        @   IN  NS  ns1.example.com.
        www IN  A   192.168.1.20
    ''')
    zone = parse_zone(path)

    assert zone.origin == 'example.com.'
    assert zone.default_ttl == 3600
    assert zone.records == (
        Record('example.com.', 3600, 'IN', 'NS', 'ns1.example.com.', 'example.com.'),
        Record('www.example.com.', 3600, 'IN', 'A', '192.168.1.20', 'example.com.'),
    )


def test_multiline_soa(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        @ IN SOA ns1.example.com. admin.example.com. (
            2023120101 ; serial
            3600       ; refresh
            1800       ; retry
            1209600    ; expire
            3600 )     ; minimum
        www IN A 192.0.2.1
    ''')
    zone = parse_zone(path)

    soa, www = zone.records
    assert soa.name == 'example.com.'
    assert soa.rtype == 'SOA'
    assert soa.rclass == 'IN'
    assert soa.rdata == (
        'ns1.example.com. admin.example.com. 2023120101 3600 1800 1209600 3600'
    )
    assert www.rdata == '192.0.2.1'


def test_multiline_rdata_is_clean(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        @ 86400 IN SOA ns1 hostmaster (   ; opening comment
                ; a comment on its own line
                1   ; serial
            7200	3600
                1W
                1D
        )
        key IN DNSKEY 257 3 13 (
            mdsswUyr3DPW132mOi8V9xESWE8jTo0d
            xCjjnopKl+GqJxpVXckHAeF+KkxLbxIL )
    ''')
    zone = parse_zone(path)

    assert [r.rtype for r in zone] == ['SOA', 'DNSKEY']
    assert zone.records[0].ttl == 86400
    assert zone.records[0].rdata == 'ns1 hostmaster 1 7200 3600 1W 1D'
    assert zone.records[1].name == 'key.example.com.'
    for record in zone:
        assert not set('();') & set(record.rdata)
        assert '  ' not in record.rdata
        assert record.rdata == record.rdata.strip()


def test_quoted_parens_do_not_reach_rdata():
    zone = parse_zone_text(
        '$ORIGIN example.com.\n'
        'note IN TXT ( "see (docs)"\n'
        '   "x; y" )\n'
    )

    record = zone.records[0]
    assert record.rdata == 'see docs x; y'
    assert not set('()') & set(record.rdata)


def test_backslash_at_line_end_does_not_join_fields():
    zone = parse_zone_text(
        '$ORIGIN example.com.\n'
        'www IN ( A\\\n'
        '    192.0.2.1 )\n'
    )

    record = zone.records[0]
    assert record.rtype == 'A'
    assert record.rdata == '192.0.2.1'


def test_single_line_parens_and_comments(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        @ IN SOA ns1 admin ( 1 2 3 4 5 ) ; all on one line
        www IN A 192.0.2.1 ; web
    ''')
    soa, www = parse_zone(path).records

    assert soa.rdata == 'ns1 admin 1 2 3 4 5'
    assert www.rdata == '192.0.2.1'


def test_name_ttl_and_class_inheritance(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        www 300 IN A 192.0.2.1
            AAAA 2001:db8::1
        mail MX 10 mx1.example.com.
        ver CH TXT "1.0"
        other TXT x
    ''')
    www_a, www_aaaa, mail, ver, other = parse_zone(path).records

    assert www_aaaa.name == 'www.example.com.'
    assert www_aaaa.ttl == 300
    assert mail.ttl == 300
    assert mail.rclass == 'IN'
    assert ver.rclass == 'CH'
    assert other.rclass == 'CH'


def test_ttl_is_zero_without_any_ttl(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        www IN A 192.0.2.1
    ''')
    zone = parse_zone(path)

    assert zone.default_ttl == 0
    assert zone.records[0].ttl == 0


def test_carried_ttl_wins_over_ttl_directive(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        a 60 IN A 192.0.2.1
        b IN A 192.0.2.2
        $TTL 2H
        c IN A 192.0.2.3
    ''')
    a, b, c = parse_zone(path).records

    assert (a.ttl, b.ttl, c.ttl) == (60, 60, 60)


def test_origin_can_change(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        www A 192.0.2.1
        $ORIGIN example.org.
        www A 192.0.2.2
        abs.example.net. A 192.0.2.3
    ''')
    zone = parse_zone(path)

    assert [r.name for r in zone] == [
        'www.example.com.',
        'www.example.org.',
        'abs.example.net.',
    ]
    assert zone.origin == 'example.org.'


def test_names_without_origin():
    zone = parse_zone_text('@ IN NS ns1\nwww IN A 192.0.2.1\n')

    assert zone.origin == ''
    assert [r.name for r in zone] == ['', 'www']


def test_initial_origin_from_options():
    zone = parse_zone_text(
        'www IN A 192.0.2.1\n',
        ParserOptions(origin='example.org.', default_ttl=600),
    )

    assert zone.records[0].name == 'www.example.org.'
    assert zone.records[0].ttl == 600


def test_quoted_txt(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        @ IN TXT "v=spf1 include:_spf.example.com ~all"
    ''')
    record = parse_zone(path).records[0]

    assert record.rdata == 'v=spf1 include:_spf.example.com ~all'


def test_crlf_line_endings(tmp_path):
    path = tmp_path / 'db.crlf'
    path.write_bytes(b'$ORIGIN example.com.\r\nwww IN A 192.0.2.1\r\n')

    assert parse_zone(path).records[0].rdata == '192.0.2.1'


def test_records_keep_the_origin_they_were_read_under():
    zone = parse_zone_text(
        '$ORIGIN example.com.\n'
        '@ IN MX 10 mail\n'
        '$ORIGIN example.org.\n'
        '@ IN MX 20 mail\n'
    )

    assert [r.origin for r in zone] == ['example.com.', 'example.org.']
    assert zone.origin == 'example.org.'


def test_byte_order_mark_is_ignored(tmp_path):
    path = tmp_path / 'db.bom'
    path.write_bytes(b'\xef\xbb\xbf$ORIGIN example.com.\nwww IN A 192.0.2.1\n')

    zone = parse_zone(path)
    assert zone.origin == 'example.com.'
    assert zone.records[0].name == 'www.example.com.'


def test_lenient_directives(write_zone, caplog):
    path = write_zone('''
        $ORIGIN example.com.
        $TTL 300
        $ORIGIN
        $TTL forever
        $INCLUDE other.zone
        www IN A 192.0.2.1
    ''')
    with caplog.at_level(logging.WARNING, logger='zonescope'):
        zone = parse_zone(path)

    assert zone.origin == 'example.com.'
    assert zone.default_ttl == 300
    assert zone.records[0].name == 'www.example.com.'
    assert zone.records[0].ttl == 300
    assert 'ignoring directive' in caplog.text


@pytest.mark.parametrize(
    ('directive', 'lineno'),
    [('$ORIGIN', 2), ('$TTL forever', 2), ('$INCLUDE other.zone', 2)],
)
def test_strict_directives(directive, lineno):
    text = f'$ORIGIN example.com.\n{directive}\nwww IN A 192.0.2.1\n'

    with pytest.raises(ZoneSyntaxError) as exc_info:
        parse_zone_text(text, ParserOptions(strict_directives=True))
    assert exc_info.value.lineno == lineno


def test_unterminated_multiline(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        www IN A 192.0.2.1
        @ IN SOA ns1 admin (
            1 2 3
            4 5
    ''')
    with pytest.raises(ZoneSyntaxError, match='unterminated') as exc_info:
        parse_zone(path)

    assert exc_info.value.lineno == 3
    assert exc_info.value.filename == str(path)


def test_syntax_error_line_number(write_zone):
    path = write_zone('''
        ; header comment
        $ORIGIN example.com.

        orphan
        www IN A 192.0.2.1
    ''')
    with pytest.raises(ZoneSyntaxError) as exc_info:
        parse_zone(path)

    err = exc_info.value
    assert err.lineno == 4
    assert str(err).startswith(f'{path}:4:')


def test_multiline_error_uses_starting_line(write_zone):
    path = write_zone('''
        $ORIGIN example.com.
        foo 300 (
        )
    ''')
    with pytest.raises(ZoneSyntaxError, match='missing record type') as exc_info:
        parse_zone(path)

    assert exc_info.value.lineno == 2


def test_missing_file_is_a_read_error(tmp_path):
    with pytest.raises(ZoneReadError, match='file not found'):
        parse_zone(tmp_path / 'nope.zone')


def test_directory_is_a_read_error(tmp_path):
    with pytest.raises(ZoneReadError):
        parse_zone(tmp_path)


def test_undecodable_file_is_a_read_error(tmp_path):
    path = tmp_path / 'db.bin'
    path.write_bytes(b'www IN TXT \xff\xfe\n')

    with pytest.raises(ZoneReadError, match='utf-8'):
        parse_zone(path)


def test_zone_is_immutable():
    zone = parse_zone_text('$ORIGIN example.com.\nwww IN A 192.0.2.1\n')

    with pytest.raises(dataclasses.FrozenInstanceError):
        zone.origin = 'other.'  # type: ignore[misc]
    with pytest.raises(dataclasses.FrozenInstanceError):
        zone.records[0].rdata = 'x'  # type: ignore[misc]
    assert isinstance(zone.records, tuple)


def test_zone_helpers():
    zone = parse_zone_text(
        '$ORIGIN example.com.\n'
        '@ IN NS ns1\n'
        'www IN A 192.0.2.1\n'
        'www IN A 192.0.2.2\n'
    )

    assert len(zone) == 3
    assert zone.rtypes == ['NS', 'A']
    assert len(zone.of_type('a')) == 2
    assert len(zone.by_name('www.example.com.')) == 2
    assert 'www.example.com.' in zone.render()


def test_parse_zones_concurrently(write_zone, tmp_path):
    good = write_zone('$ORIGIN example.com.\nwww IN A 192.0.2.1\n', name='good.zone')
    bad = write_zone('$ORIGIN example.com.\nwww\n', name='bad.zone')
    missing = tmp_path / 'missing.zone'

    results = asyncio.run(parse_zones([str(good), str(bad), str(missing)]))

    assert isinstance(results[str(good)], Zone)
    assert isinstance(results[str(bad)], ZoneSyntaxError)
    assert isinstance(results[str(missing)], ZoneReadError)


def test_file_is_closed_after_syntax_error(write_zone, monkeypatch):
    path = write_zone('$ORIGIN example.com.\norphan\nwww IN A 192.0.2.1\n')
    readers = []
    iter_lines = fs_utils.iter_lines

    def tracking_iter_lines(*args, **kwargs):
        lines = iter_lines(*args, **kwargs)
        readers.append(lines)
        return lines

    monkeypatch.setattr(fs_utils, 'iter_lines', tracking_iter_lines)

    with pytest.raises(ZoneSyntaxError):
        parse_zone(path)
    results = asyncio.run(parse_zones([str(path)]))

    assert isinstance(results[str(path)], ZoneSyntaxError)
    assert len(readers) == 2
    for lines in readers:
        assert lines.gi_frame is None
