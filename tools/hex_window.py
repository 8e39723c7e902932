import re

ERASE_VALUE = 0xFF          # erased flash
ADDRESS_LIMIT = 0x100000000  # 32-bit address space
POLYNOMIAL = 0xEDB88320      # reflected CRC-32 polynomial used by the firmware

HEX_NUMBER_RE = re.compile(r'(?:0[xX])?[0-9A-Fa-f]+')


class HexToolError(Exception):
    pass


class WindowOverflowError(HexToolError, ValueError):
    pass


class EmptyWindowError(HexToolError):
    pass


class AddressWindow:
    """Half-open address range [start, start + size) to extract"""

    __slots__ = ('start', 'size')

    def __init__(self, start, size):
        if not 0 <= start < ADDRESS_LIMIT:
            raise WindowOverflowError(f"Start address 0x{start:X} is outside the 32-bit address space")
        if not 0 < size < ADDRESS_LIMIT:
            raise WindowOverflowError(f"Window size 0x{size:X} must be between 1 and 0xFFFFFFFF bytes")
        if start + size > ADDRESS_LIMIT:
            raise WindowOverflowError(
                f"Window 0x{start:08X} + 0x{size:X} runs past the end of the 32-bit address space")
        object.__setattr__(self, 'start', start)
        object.__setattr__(self, 'size', size)

    def __setattr__(self, name, value):
        raise AttributeError("AddressWindow is immutable")

    @classmethod
    def from_hex(cls, start_text, size_text):
        """Build a window from hex strings such as '0x08000000' and 'E738'"""
        if not HEX_NUMBER_RE.fullmatch(start_text):
            raise WindowOverflowError(f"Invalid start address: {start_text}")
        if not HEX_NUMBER_RE.fullmatch(size_text):
            raise WindowOverflowError(f"Invalid size: {size_text}")
        return cls(int(start_text, 16), int(size_text, 16))

    @property
    def end(self):
        return self.start + self.size

    def __contains__(self, address):
        return self.start <= address < self.start + self.size

    def __eq__(self, other):
        if not isinstance(other, AddressWindow):
            return NotImplemented
        return (self.start, self.size) == (other.start, other.size)

    def __hash__(self):
        return hash((self.start, self.size))

    def __repr__(self):
        return f"AddressWindow(start=0x{self.start:08X}, size=0x{self.size:X})"


def extract_window(memory, window):
    """Materialize the window from an address->byte map, padding gaps with ERASE_VALUE"""
    binary_data = bytearray([ERASE_VALUE]) * window.size
    data_found_in_range = False
    for address, value in memory.items():
        if address in window:
            binary_data[address - window.start] = value
            data_found_in_range = True
    if not data_found_in_range:
        raise EmptyWindowError("No data found within the specified address range.")
    return bytes(binary_data)


def crc32(data):
    """CRC-32 (ISO-HDLC) of a block of data, computed bit by bit"""
    crc = 0xFFFFFFFF
    for byte in data:
        crc ^= byte
        for _ in range(8):
            if crc & 1:
                crc = (crc >> 1) ^ POLYNOMIAL
            else:
                crc >>= 1
    return crc ^ 0xFFFFFFFF


def format_crc(crc):
    return f"0x{crc:08X}"
