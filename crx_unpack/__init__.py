from .container import (CrxHeader, FormatVersion, HeaderDescriptor, convert,
                        parse_descriptor, read_header)
from .errors import (CrxFormatError, DownloadError, MalformedHeader,
                     NestingTooDeep, NotACrxContainer, TruncatedContainer,
                     TruncatedMagic, UnsupportedVersion)
from .identity import Crx3IdentityDecoder, IdentityDecoder, extension_id

__version__ = "0.1.0"

__all__ = [
    "convert", "read_header", "parse_descriptor",
    "CrxHeader", "FormatVersion", "HeaderDescriptor",
    "Crx3IdentityDecoder", "IdentityDecoder", "extension_id",
    "CrxFormatError", "DownloadError", "MalformedHeader", "NestingTooDeep",
    "NotACrxContainer", "TruncatedContainer", "TruncatedMagic", "UnsupportedVersion",
]
