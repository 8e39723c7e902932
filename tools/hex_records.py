import re
from collections import namedtuple

DATA = 0x00
END_OF_FILE = 0x01
EXTENDED_LINEAR_ADDRESS = 0x04

START_CODE = ':'
HEADER_LENGTH = 8   # byte count, address offset, record type

HEX_RE = re.compile(r'[0-9A-Fa-f]*')

Record = namedtuple('Record', ['byte_count', 'address', 'record_type', 'data', 'checksum'])
LineError = namedtuple('LineError', ['line_number', 'line', 'reason'])


def _hex_field(text):
    """Return the integer value of a hex field, or None if it is not pure hex"""
    if not HEX_RE.fullmatch(text):
        return None
    return int(text, 16)


def record_checksum(byte_count, address, record_type, data):
    """Two's complement of the sum of all record bytes before the checksum"""
    total = byte_count + (address >> 8) + (address & 0xFF) + record_type + sum(data)
    return (-total) & 0xFF


def parse_record(line, line_number=0, verify_checksum=False):
    """Parse one Intel HEX line.

    Returns a Record, a LineError describing why the line was rejected, or
    None when the line is not a record at all (blank, or no ':' start code).
    """
    line = line.rstrip()
    if not line or line[0] != START_CODE:
        return None

    def fail(reason):
        return LineError(line_number, line, reason)

    body = line[1:]
    if len(body) < HEADER_LENGTH:
        return fail(f"record too short ({len(body)} characters after ':')")

    byte_count = _hex_field(body[0:2])
    address = _hex_field(body[2:6])
    record_type = _hex_field(body[6:8])
    if byte_count is None:
        return fail(f"invalid byte count '{body[0:2]}'")
    if address is None:
        return fail(f"invalid address '{body[2:6]}'")
    if record_type is None:
        return fail(f"invalid record type '{body[6:8]}'")

    data_end = HEADER_LENGTH + 2 * byte_count
    if len(body) < data_end:
        return fail(f"byte count {byte_count} needs {2 * byte_count} data characters, "
                    f"only {len(body) - HEADER_LENGTH} present")
    data_text = body[HEADER_LENGTH:data_end]
    if not HEX_RE.fullmatch(data_text):
        return fail("invalid hex digit in data")
    data = bytes.fromhex(data_text)

    if record_type == EXTENDED_LINEAR_ADDRESS and byte_count < 2:
        return fail("extended linear address record needs 2 data bytes")

    checksum = None
    checksum_text = body[data_end:data_end + 2]
    if len(checksum_text) == 2:
        checksum = _hex_field(checksum_text)

    if verify_checksum:
        if checksum is None:
            return fail("missing or invalid checksum byte")
        expected = record_checksum(byte_count, address, record_type, data)
        if checksum != expected:
            return fail(f"checksum mismatch (read 0x{checksum:02X}, expected 0x{expected:02X})")

    return Record(byte_count, address, record_type, data, checksum)


def iter_records(lines, verify_checksum=False):
    """Yield (line_number, Record or LineError) for every candidate record line"""
    for line_number, line in enumerate(lines, start=1):
        result = parse_record(line, line_number, verify_checksum)
        if result is not None:
            yield line_number, result
