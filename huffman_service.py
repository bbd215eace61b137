# filename: huffman_service.py

import logging

from bit_stream import EOF, BitInputStream, BitOutputStream
from huffman_core import BITS_PER_INT, HUFF_TREE, HuffmanLogic, PSEUDO_EOF
from huffman_errors import HuffException, MalformedHeader

logger = logging.getLogger(__name__)

DEBUG_LOW = 1
DEBUG_HIGH = 4


class HuffmanService:
    def __init__(self, debug=0):
        self.logic = HuffmanLogic()
        self.debug = debug

    def compress(self, data):
        bit_out = BitOutputStream()
        self.compress_stream(BitInputStream(data), bit_out)
        return bit_out.getvalue()

    def decompress(self, data):
        bit_out = BitOutputStream()
        self.decompress_stream(BitInputStream(data), bit_out)
        return bit_out.getvalue()

    def compress_stream(self, bit_in, bit_out):
        """
        Compress everything readable from bit_in into bit_out and close bit_out.

        Args:
            bit_in: BitInputStream over the raw bytes; it is rewound between passes
            bit_out: BitOutputStream receiving magic, tree header and body

        Returns:
            Number of bits written before padding
        """
        counts = self.logic.count_frequencies(bit_in)
        tree = self.logic.build_tree(counts)
        codes = self.logic.generate_codes(tree)
        if self.debug >= DEBUG_HIGH:
            self._log_codes(counts, codes)

        bit_out.write_bits(BITS_PER_INT, HUFF_TREE)
        self.logic.write_header(tree, bit_out)
        header_bits = bit_out.bits_written - BITS_PER_INT

        bit_in.reset()
        body_bits = self.logic.write_body(codes, bit_in, bit_out)
        bit_out.close()

        if self.debug >= DEBUG_LOW:
            logger.info(
                "compressed %d bytes: header %d bits, body %d bits, total %d bits",
                sum(counts) - 1, header_bits, body_bits, bit_out.bits_written,
            )
        return bit_out.bits_written

    def decompress_stream(self, bit_in, bit_out):
        """
        Decode a compressed stream from bit_in into bit_out and close bit_out.

        Raises MalformedHeader, TruncatedTree or TruncatedBody; bit_out is left
        unclosed on failure so nothing reaches its sink.
        """
        try:
            magic = bit_in.read_bits(BITS_PER_INT)
            if magic == EOF:
                raise MalformedHeader(f"stream holds only {len(bit_in)} bits, too short for the magic number")
            if magic != HUFF_TREE:
                raise MalformedHeader(f"illegal header starts with {magic:#010x}, expected {HUFF_TREE:#010x}")
            tree = self.logic.read_header(bit_in)
            header_bits = bit_in.bits_read - BITS_PER_INT
            decoded = self.logic.read_body(tree, bit_in, bit_out)
        except HuffException as e:
            logger.error("decompression failed: %s", e)
            raise
        bit_out.close()

        if self.debug >= DEBUG_LOW:
            logger.info(
                "decompressed %d bytes: header %d bits, read %d of %d bits",
                decoded, header_bits, bit_in.bits_read, len(bit_in),
            )
        return decoded

    def _log_codes(self, counts, codes):
        for char in sorted(codes):
            label = "PSEUDO_EOF" if char == PSEUDO_EOF else repr(bytes([char]))
            logger.debug("%s count=%d code=%s", label, counts[char], codes[char])
