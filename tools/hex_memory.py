import sys

from hex_records import DATA, END_OF_FILE, EXTENDED_LINEAR_ADDRESS, LineError, iter_records


def print_line_error(error):
    print(f"Warning: Could not parse line {error.line_number} '{error.line}'. Reason: {error.reason}",
          file=sys.stderr)


class MemoryAssembler:
    """Folds parsed records into an address->byte map restricted to one window.

    high_address_base holds the upper 16 address bits set by the last
    extended linear address record.
    """

    def __init__(self, window):
        self.window = window
        self.high_address_base = 0
        self.memory = {}
        self.finished = False
        self.records_folded = 0
        self.errors = []

    def fold(self, record):
        """Apply one record. Returns False once the end of file record is seen."""
        if self.finished:
            return False
        self.records_folded += 1

        if record.record_type == EXTENDED_LINEAR_ADDRESS:
            self.high_address_base = ((record.data[0] << 8) | record.data[1]) << 16
        elif record.record_type == DATA:
            base = self.high_address_base + record.address
            for i, value in enumerate(record.data):
                byte_address = base + i
                # only keep bytes that fall within the target window
                if byte_address in self.window:
                    self.memory[byte_address] = value
        elif record.record_type == END_OF_FILE:
            self.finished = True
            return False
        return True

    def reject(self, error):
        self.errors.append(error)

    @property
    def lines_rejected(self):
        return len(self.errors)


def assemble(lines, window, verify_checksum=False, on_error=print_line_error):
    """Parse lines of an Intel HEX file and fold them into a MemoryAssembler.

    Lines that fail to parse are passed to on_error and skipped. Reading
    stops at the first end of file record; the lines after it are not parsed.
    """
    assembler = MemoryAssembler(window)
    for _, result in iter_records(lines, verify_checksum):
        if isinstance(result, LineError):
            assembler.reject(result)
            if on_error is not None:
                on_error(result)
            continue
        if not assembler.fold(result):
            break
    return assembler
