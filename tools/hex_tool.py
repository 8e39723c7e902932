#!/usr/bin/env python3
"""
Convert an Intel HEX file to a raw binary image of one address window.

Only bytes inside [start, start + size) are kept; addresses in the window that
the HEX file never writes are padded with 0xFF (erased flash). The CRC-32 of
the resulting image is printed so a post-build script can check the flash.

Usage: hex_tool <input.hex> <output.bin> <start_addr_hex> <size_hex>
Example: hex_tool app.hex app.bin 0x08000000 0xE738
"""
import os
import sys

from hex_memory import assemble, print_line_error
from hex_window import AddressWindow, HexToolError, crc32, extract_window, format_crc


def convert(lines, window, verify_checksum=False, on_error=print_line_error):
    """Run the whole pipeline over HEX text lines, returns (binary_data, crc)"""
    assembler = assemble(lines, window, verify_checksum, on_error)
    binary_data = extract_window(assembler.memory, window)
    return binary_data, crc32(binary_data)


def read_hex_file(hex_filename, window, verify_checksum=False):
    with open(hex_filename, mode='r', encoding='ascii', errors='replace') as hex_file:
        return assemble(hex_file, window, verify_checksum)


def write_bin_file(bin_filename, binary_data):
    """Write the image in one go; a partially written file is removed"""
    try:
        with open(bin_filename, 'wb') as bin_file:
            bin_file.write(binary_data)
    except OSError:
        # the close can fail too, after the data is already buffered
        if os.path.exists(bin_filename):
            os.remove(bin_filename)
        raise


def make_bin(hex_filename, bin_filename, window, verify_checksum=False):
    """Convert hex_filename to bin_filename, returns the CRC-32 of the image"""
    try:
        assembler = read_hex_file(hex_filename, window, verify_checksum)
    except OSError:
        raise HexToolError(f"Could not open input file: {hex_filename}") from None
    print("Successfully parsed HEX file.")

    binary_data = extract_window(assembler.memory, window)

    try:
        write_bin_file(bin_filename, binary_data)
    except OSError:
        raise HexToolError(f"Could not create output file: {bin_filename}") from None
    print(f"Successfully created binary file: {bin_filename}")
    print(f"Size: {len(binary_data)} bytes")

    crc = crc32(binary_data)
    print(f"Generated Hash: {format_crc(crc)}")
    return crc


def print_usage():
    print("Usage: hex_tool <input.hex> <output.bin> <start_addr_hex> <size_hex>")
    print("Example: hex_tool app.hex bank1.bin 0x08000000 0xE4F0")


def main(args=None):
    if args is None:
        args = sys.argv[1:]
    if len(args) != 4:
        print_usage()
        sys.exit(1)

    hex_filename, bin_filename, start_address, size = args
    try:
        window = AddressWindow.from_hex(start_address, size)
        make_bin(hex_filename, bin_filename, window)
    except HexToolError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main(sys.argv[1:])
