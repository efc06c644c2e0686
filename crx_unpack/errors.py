class CrxFormatError(ValueError):
    """Base class for structural problems in a CRX container."""


class NotACrxContainer(CrxFormatError):
    pass


class UnsupportedVersion(CrxFormatError):

    def __init__(self, version):
        super().__init__(f"Unexpected crx format version number: {version}")
        self.version = version


class MalformedHeader(CrxFormatError):
    pass


class TruncatedContainer(CrxFormatError):

    def __init__(self, offset, size):
        super().__init__(
            f"Zip payload offset {offset} is past the end of the container ({size} bytes)")
        self.offset = offset
        self.size = size


class NestingTooDeep(CrxFormatError):

    def __init__(self, depth):
        super().__init__(f"Nested CRX: more than {depth} wrapping layers")
        self.depth = depth


class DownloadError(IOError):
    pass


class TruncatedMagic(NotACrxContainer, MalformedHeader):
    """Fewer than four bytes: no room for the magic signature."""
