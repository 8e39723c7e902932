import pytest

from hex_records import (DATA, END_OF_FILE, EXTENDED_LINEAR_ADDRESS, LineError, Record,
                         iter_records, parse_record, record_checksum)


def test_data_record():
    record = parse_record(':0400100001020304E2\n')
    assert record == Record(4, 0x0010, DATA, b'\x01\x02\x03\x04', 0xE2)


def test_lowercase_hex():
    record = parse_record(':04000000deadbeefc4')
    assert record.data == b'\xde\xad\xbe\xef'
    assert record.checksum == 0xC4


def test_end_of_file_record():
    record = parse_record(':00000001FF')
    assert record.record_type == END_OF_FILE
    assert record.data == b''


def test_extended_linear_address_record():
    record = parse_record(':020000040800F2')
    assert record.record_type == EXTENDED_LINEAR_ADDRESS
    assert record.data == b'\x08\x00'


@pytest.mark.parametrize('line', ['', '\n', '   ', '; comment', '@08000000', 'deadbeef'])
def test_non_record_lines_are_skipped(line):
    assert parse_record(line) is None


def test_crlf_line_ending():
    assert parse_record(':00000001FF\r\n').checksum == 0xFF


def test_unknown_record_type_is_accepted():
    record = parse_record(':0400000508000000EF')
    assert record.record_type == 0x05


@pytest.mark.parametrize('line, reason', [
    (':0000', 'too short'),
    (':0G00000000', 'byte count'),
    (':00Z0000000', 'address'),
    (':000000X100', 'record type'),
    (':0400000001', 'needs 8 data characters'),
    (':02000000ZZ00FE', 'invalid hex digit'),
    (':0100000401FA', 'needs 2 data bytes'),
    (':02000000 0100FD', 'invalid hex digit'),
])
def test_malformed_lines(line, reason):
    result = parse_record(line, line_number=7)
    assert isinstance(result, LineError)
    assert result.line_number == 7
    assert result.line == line
    assert reason in result.reason


def test_checksum_not_verified_by_default():
    record = parse_record(':0100000042AA')
    assert record.data == b'\x42'
    assert record.checksum == 0xAA


def test_missing_checksum_is_tolerated_by_default():
    assert parse_record(':0100000042').checksum is None


def test_verify_checksum():
    assert parse_record(':0400100001020304E2', verify_checksum=True).data == b'\x01\x02\x03\x04'
    bad = parse_record(':0400100001020304E3', verify_checksum=True)
    assert isinstance(bad, LineError)
    assert 'checksum mismatch' in bad.reason
    missing = parse_record(':0400100001020304', verify_checksum=True)
    assert 'missing' in missing.reason


def test_record_checksum():
    assert record_checksum(0, 0, END_OF_FILE, b'') == 0xFF
    assert record_checksum(2, 0, EXTENDED_LINEAR_ADDRESS, b'\x08\x00') == 0xF2


def test_iter_records_numbers_lines():
    lines = [
        ':020000040800F2\n',
        '\n',
        ':01000000ZZ00\n',
        ':00000001FF\n',
    ]
    results = list(iter_records(lines))
    assert [number for number, _ in results] == [1, 3, 4]
    assert isinstance(results[1][1], LineError)
    assert results[2][1].record_type == END_OF_FILE
