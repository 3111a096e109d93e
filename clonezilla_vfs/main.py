import argparse
import sys

from loguru import logger

from clonezilla_vfs import containers
from clonezilla_vfs.config import settings
from clonezilla_vfs.exceptions import CatalogError
from clonezilla_vfs.logging import operation_context, setup_logging
from clonezilla_vfs.sevenzip import SevenZip


def _format_entry(entry):
    kind = "D" if entry.is_folder else "F"
    size = "" if entry.size is None else str(entry.size)
    modified = entry.modified.isoformat(sep=" ") if entry.modified else ""
    return f"{kind} {size:>12} {modified:<26} {entry.name}"


def _format_container(container):
    lines = [f"{container.kind.value}: {container.container_name} ({container.path})"]
    for partition in container.partitions:
        details = ", ".join(
            value for value in (partition.fstype, partition.compression) if value
        )
        suffix = f" [{details}]" if details else ""
        lines.append(f"  {partition.name}{suffix}: {len(partition.image_files)} file(s)")
    return lines


def cmd_entries(args, sevenzip):
    entries = sevenzip.get_archive_entries(args.archive)
    try:
        for entry in entries:
            print(_format_entry(entry))
    finally:
        entries.terminate()
    return 0


def cmd_archives(args, sevenzip):
    archives = sevenzip.get_archives_in_folder(args.folder)
    try:
        for index, archive in enumerate(archives):
            if args.limit and index >= args.limit:
                break
            print(archive)
    finally:
        archives.terminate()
    return 0


def cmd_extract(args, sevenzip):
    with operation_context("extract", archive=args.archive, destination=args.destination):
        sevenzip.extract_file(args.archive, args.destination)
    return 0


def cmd_classify(args, sevenzip):
    for path in args.paths:
        print(f"{containers.classify(path).value}\t{path}")
    return 0


def cmd_open(args, sevenzip):
    cache_folder = args.cache_folder or settings.get_setting("cache_folder")
    random_seek = args.random_seek or settings.get_bool("will_perform_random_seeking")
    with operation_context("open", paths=len(args.paths)):
        opened = containers.from_paths(
            args.paths,
            cache_folder,
            partitions_to_load=args.partition or None,
            will_perform_random_seeking=random_seek,
        )
    for container in opened:
        for line in _format_container(container):
            print(line)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="clonezilla-vfs",
        description="Identify Clonezilla images, partclone files and archives",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--trace", action="store_true", help="Also log raw 7-Zip output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report found archives")
    subparsers = parser.add_subparsers(dest="command", required=True)

    entries = subparsers.add_parser("entries", help="List the entries of an archive")
    entries.add_argument("archive")
    entries.set_defaults(func=cmd_entries)

    archives = subparsers.add_parser("archives", help="Find archives inside a folder")
    archives.add_argument("folder")
    archives.add_argument("--limit", type=int, default=0, help="Stop after N archives")
    archives.set_defaults(func=cmd_archives)

    extract = subparsers.add_parser("extract", help="Extract an archive")
    extract.add_argument("archive")
    extract.add_argument("destination")
    extract.set_defaults(func=cmd_extract)

    classify = subparsers.add_parser("classify", help="Print the container type of paths")
    classify.add_argument("paths", nargs="+")
    classify.set_defaults(func=cmd_classify)

    open_ = subparsers.add_parser("open", help="Open containers and list their partitions")
    open_.add_argument("paths", nargs="+")
    open_.add_argument("--cache-folder", default=None)
    open_.add_argument(
        "-p", "--partition", action="append", default=[], help="Only load this partition"
    )
    open_.add_argument("--random-seek", action="store_true")
    open_.set_defaults(func=cmd_open)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=args.debug, trace=args.trace)

    sevenzip = SevenZip(verbose=args.verbose or None)
    try:
        return args.func(args, sevenzip)
    except CatalogError as error:
        logger.error(str(error))
        return 1


if __name__ == "__main__":
    sys.exit(main())
