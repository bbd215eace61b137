# filename: bit_stream.py

import logging

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

logger = logging.getLogger(__name__)

# Returned by read_bits when the stream cannot supply the requested bits
EOF = -1


class BitInputStream:
    """
    Reads unsigned integers of arbitrary bit width from a byte source, MSB first.

    The whole source is loaded up front so the stream can be rewound with reset().
    """

    def __init__(self, source):
        if hasattr(source, "read"):
            source = source.read()
        self.bits = bitarray(endian="big")
        self.bits.frombytes(bytes(source))
        self.pos = 0

    def __len__(self):
        return len(self.bits)

    @property
    def bits_read(self):
        return self.pos

    def read_bits(self, n):
        """
        Read the next n bits as an unsigned integer.

        Returns EOF and consumes nothing if fewer than n bits remain.
        """
        if self.pos + n > len(self.bits):
            return EOF
        if n == 0:
            return 0
        if n == 1:
            value = self.bits[self.pos]
        else:
            value = ba2int(self.bits[self.pos:self.pos + n])
        self.pos += n
        return value

    def reset(self):
        self.pos = 0


class BitOutputStream:
    """
    Collects bits in memory and writes them, padded to a whole byte, on close().
    """

    def __init__(self, sink=None):
        self.sink = sink
        self.bits = bitarray(endian="big")
        self.closed = False
        self._data = None

    @property
    def bits_written(self):
        return len(self.bits)

    def write_bits(self, n, value):
        # Only the low n bits of value are kept
        if self.closed:
            raise ValueError("write to closed BitOutputStream")
        if n == 0:
            return
        self.bits += int2ba(value & ((1 << n) - 1), length=n, endian="big")

    def close(self):
        if self.closed:
            return
        self._data = self.bits.tobytes()
        if self.sink is not None:
            self.sink.write(self._data)
            if hasattr(self.sink, "flush"):
                self.sink.flush()
        self.closed = True
        logger.debug("closed bit stream: %d bits, %d bytes", len(self.bits), len(self._data))

    def getvalue(self):
        if not self.closed:
            return self.bits.tobytes()
        return self._data
