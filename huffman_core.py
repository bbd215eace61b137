# filename: huffman_core.py

import heapq
import logging

from bit_stream import EOF
from huffman_errors import MalformedHeader, TruncatedBody, TruncatedTree

logger = logging.getLogger(__name__)

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE
HUFF_NUMBER = 0xFACE8200
HUFF_TREE = HUFF_NUMBER | 1

# Leaf values are written one bit wider than a word so PSEUDO_EOF fits
LEAF_BITS = BITS_PER_WORD + 1


class HuffmanNode:
    def __init__(self, char, freq, left=None, right=None, order=0):
        self.char = char
        self.freq = freq
        self.left = left
        self.right = right
        self.order = order

    def is_leaf(self):
        return self.left is None and self.right is None

    def __lt__(self, other):
        return (self.freq, self.order) < (other.freq, other.order)

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.char!r}, {self.freq})"
        return f"HuffmanNode(None, {self.freq}, {self.left!r}, {self.right!r})"


class HuffmanLogic:
    def count_frequencies(self, bit_in):
        # Frequency analysis of the input byte data
        counts = [0] * (ALPH_SIZE + 1)
        while True:
            word = bit_in.read_bits(BITS_PER_WORD)
            if word == EOF:
                break
            counts[word] += 1
        counts[PSEUDO_EOF] = 1
        return counts

    def build_tree(self, counts):
        # Leaves order by symbol value on equal weight; merged nodes sort after all leaves
        priority_queue = [
            HuffmanNode(char, freq, order=char)
            for char, freq in enumerate(counts[:ALPH_SIZE])
            if freq
        ]
        priority_queue.append(HuffmanNode(PSEUDO_EOF, max(counts[PSEUDO_EOF], 1), order=PSEUDO_EOF))
        heapq.heapify(priority_queue)

        # Iteratively merge nodes to form the binary tree
        next_order = PSEUDO_EOF + 1
        while len(priority_queue) > 1:
            left = heapq.heappop(priority_queue)
            right = heapq.heappop(priority_queue)
            merged = HuffmanNode(None, left.freq + right.freq, left, right, order=next_order)
            next_order += 1
            heapq.heappush(priority_queue, merged)

        return priority_queue[0]

    def generate_codes(self, node, current_code="", codes=None):
        if codes is None:
            codes = {}
        if node.is_leaf():
            # A lone root leaf still needs one bit per symbol
            codes[node.char] = current_code or "0"
            return codes
        self.generate_codes(node.left, current_code + "0", codes)
        self.generate_codes(node.right, current_code + "1", codes)
        return codes

    def write_header(self, node, bit_out):
        if node.is_leaf():
            bit_out.write_bits(1, 1)
            bit_out.write_bits(LEAF_BITS, node.char)
            return
        bit_out.write_bits(1, 0)
        self.write_header(node.left, bit_out)
        self.write_header(node.right, bit_out)

    def read_header(self, bit_in, depth=0):
        # A tree over ALPH_SIZE + 1 leaves is never deeper than ALPH_SIZE
        if depth > ALPH_SIZE:
            raise MalformedHeader(f"tree header nests deeper than {ALPH_SIZE} levels")
        bit = bit_in.read_bits(1)
        if bit == EOF:
            raise TruncatedTree(f"header ended after {bit_in.bits_read} bits before the tree was complete")
        if bit == 0:
            left = self.read_header(bit_in, depth + 1)
            right = self.read_header(bit_in, depth + 1)
            return HuffmanNode(None, 0, left, right)

        value = bit_in.read_bits(LEAF_BITS)
        if value == EOF:
            raise TruncatedTree(f"header ended inside a {LEAF_BITS}-bit leaf value")
        if value > PSEUDO_EOF:
            raise MalformedHeader(f"leaf value {value} is outside the symbol range 0..{PSEUDO_EOF}")
        return HuffmanNode(value, 0)

    def write_body(self, codes, bit_in, bit_out):
        start = bit_out.bits_written
        while True:
            word = bit_in.read_bits(BITS_PER_WORD)
            if word == EOF:
                break
            code = codes[word]
            bit_out.write_bits(len(code), int(code, 2))

        # The sentinel is the only end-of-message marker inside the bit stream
        code = codes[PSEUDO_EOF]
        bit_out.write_bits(len(code), int(code, 2))
        return bit_out.bits_written - start

    def read_body(self, root, bit_in, bit_out):
        decoded = 0
        node = root
        while True:
            bit = bit_in.read_bits(1)
            if bit == EOF:
                raise TruncatedBody(f"body ended after {decoded} bytes without reaching PSEUDO_EOF")
            if not root.is_leaf():
                node = node.right if bit else node.left
            if node.is_leaf():
                if node.char == PSEUDO_EOF:
                    return decoded
                bit_out.write_bits(BITS_PER_WORD, node.char)
                decoded += 1
                node = root
