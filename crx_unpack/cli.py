import argparse
import base64
import logging
import sys
from pathlib import Path

from .container import convert, read_header
from .errors import CrxFormatError, DownloadError
from .identity import extension_id
from .webstore import Architecture, OperatingSystem, UpdateQuery, download

logger = logging.getLogger(__name__)


def write_zip(payload: bytes, path) -> Path:
    path = Path(path)
    path.write_bytes(payload)
    logger.info("Wrote %d bytes to %s", len(payload), path)
    return path


def _convert_file(args):
    crx_path = Path(args.input)
    zip_bytes = convert(crx_path.read_bytes())
    write_zip(zip_bytes, args.output or crx_path.with_suffix(".zip"))


def _fetch(args):
    query = UpdateQuery(args.extension_id, os=OperatingSystem(args.os), arch=Architecture(args.arch))
    zip_bytes = convert(download(query, timeout=args.timeout))
    write_zip(zip_bytes, args.output or f"{args.extension_id}.zip")


def _info(args):
    header = read_header(Path(args.input).read_bytes())
    descriptor = header.descriptor
    print(f"{'Format version':30}: {int(descriptor.format_version)}")
    print(f"{'Header section length':30}: {descriptor.declared_section_length}")
    print(f"{'Zip payload offset':30}: {descriptor.zip_payload_offset}")
    print(f"{'Nested CRX':30}: {'yes' if header.nested else 'no'}")
    if header.identity:
        print(f"{'Public Key (base64)':30}: {base64.b64encode(header.identity).decode()}")
        print(f"{'Extension ID':30}: {extension_id(header.identity)}")
    else:
        print(f"{'Public Key':30}: not found")


def build_parser():
    parser = argparse.ArgumentParser(prog="crx-unpack", description="Convert CRX extension packages to ZIP archives.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    commands = parser.add_subparsers(dest="command", required=True)

    convert_cmd = commands.add_parser("convert", help="Convert a local CRX file.")
    convert_cmd.add_argument("input", help="Path to the CRX file.")
    convert_cmd.add_argument("-o", "--output", help="Path of the ZIP file to write.")
    convert_cmd.set_defaults(func=_convert_file)

    fetch_cmd = commands.add_parser("fetch", help="Download an extension and convert it.")
    fetch_cmd.add_argument("extension_id", help="32 character extension ID.")
    fetch_cmd.add_argument("-o", "--output", help="Path of the ZIP file to write.")
    fetch_cmd.add_argument("--os", default=OperatingSystem.WINDOWS.value,
                           choices=[o.value for o in OperatingSystem])
    fetch_cmd.add_argument("--arch", default=Architecture.X86_64.value,
                           choices=[a.value for a in Architecture])
    fetch_cmd.add_argument("--timeout", type=float, default=30)
    fetch_cmd.set_defaults(func=_fetch)

    info_cmd = commands.add_parser("info", help="Show the header of a CRX file.")
    info_cmd.add_argument("input", help="Path to the CRX file.")
    info_cmd.set_defaults(func=_info)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except (CrxFormatError, DownloadError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
