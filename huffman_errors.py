# filename: huffman_errors.py


class HuffException(Exception):
    """Base class for every failure raised while reading a compressed stream."""


class MalformedHeader(HuffException):
    pass


class TruncatedTree(HuffException):
    pass


class TruncatedBody(HuffException):
    pass
