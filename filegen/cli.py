# filegen/cli.py

import argparse
import os
import sys
import logging

from filegen.constants import LOG_LEVEL_ENV
from filegen.errors import ConfigurationError, FileGenException
from filegen.session import GenerationParameters, GenerationSession
from filegen.utils.data import human, human_size_to_bytes, write_manifest
from filegen.utils.digest import md5_file
from filegen.utils.encoding import b64decode, b64encode


logger = logging.getLogger(__name__)


def _size(value: str) -> int:
    try:
        return human_size_to_bytes(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='filegen',
        description='Generate incompressible test files, hash files, and encode/decode base64')
    parser.add_argument('--log-level', default=os.environ.get(LOG_LEVEL_ENV, 'WARNING').upper(), type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help=f'Logging level (default: ${LOG_LEVEL_ENV} or WARNING)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    # GENERATE
    gen_parser = subparsers.add_parser(
        'generate', help='Generate test files with random, incompressible content',
        epilog='Example: filegen generate --count 10 --size 1MB --prefix ABC --output /tmp/out --verify')
    gen_parser.add_argument('--count', type=int, required=True, help='Number of files to generate')
    gen_parser.add_argument('--size', type=_size, required=True,
                            help='Size of each file in bytes, or with a unit (64KB, 1MB, 2GB)')
    gen_parser.add_argument('--prefix', required=True, help='Exactly 3 characters for the filename prefix')
    gen_parser.add_argument('--output', required=True, help='Target directory for file creation')
    gen_parser.add_argument('--verify', action='store_true', help='Verify generated files after creation')
    gen_parser.add_argument('--cleanup', action='store_true', help='Prompt to clean up generated files')
    gen_parser.add_argument('--yes', '-y', action='store_true', help='Clean up without prompting')
    gen_parser.add_argument('--manifest', help='Write a CSV row per generated file to this path')

    # MD5
    md5_parser = subparsers.add_parser('md5', help='MD5 hash of a file')
    md5_parser.add_argument('file', help='File to hash')

    # BASE64
    b64_parser = subparsers.add_parser('base64', help='Encode or decode base64')
    b64_parser.add_argument('operation', choices=['encode', 'decode'])
    b64_parser.add_argument('input', help='File path, or a literal string if no such file exists')

    return parser


def _confirm(question: str) -> bool:
    try:
        answer = input(f"{question} (y/N) ")
    except EOFError:
        return False
    return answer.strip().lower() in ('y', 'yes')


def _print_progress(p) -> None:
    print(f"Progress: {p.files_generated}/{p.total_files} files ({p.percent_complete:.1f}%) "
          f"- Current: {p.current_file_name}")


def run_generate(args) -> int:
    try:
        params = GenerationParameters(args.count, args.size, args.prefix, args.output)
    except ConfigurationError as e:
        logger.error("CLI,GENERATE,ERROR,config,msg=%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with GenerationSession(params) as session:
        print(f"Generating {params.file_count} files of {params.file_size_bytes:,} bytes each...")
        print(f"Total disk space required: {session.total_bytes:,} bytes ({human(session.total_bytes)})")
        print(f"Output directory: {params.output_directory}")

        result = session.generate(progress=_print_progress)
        status = 0
        if result.ok:
            print(f"Successfully generated {len(result.files)} files.")
        else:
            print(f"Error during file generation: {result.error}", file=sys.stderr)
            print(f"{len(result.files)} files were created before the failure.", file=sys.stderr)
            status = 1

        if args.manifest:
            write_manifest(session.records, args.manifest)

        if args.verify and result.files:
            print("Verifying generated files...")
            report = session.verify()
            for line in report.messages:
                print(line)
            print("All files verified successfully." if report.passed else "Some files failed verification.")
            if not report.passed:
                status = 1

        if args.cleanup and (args.yes or _confirm("Do you want to cleanup generated files?")):
            print("Cleaning up generated files...")
            report = session.cleanup()
            for line in report.messages:
                print(line, file=sys.stderr)
            print(f"Deleted {report.deleted} files.")
            if report.errors:
                status = 1

    return status


def run_md5(args) -> int:
    if not os.path.isfile(args.file):
        print(f"Error: File '{args.file}' not found.", file=sys.stderr)
        return 1
    print(f"MD5 hash of '{args.file}': {md5_file(args.file)}")
    return 0


def run_base64(args) -> int:
    if args.operation == 'encode':
        print(b64encode(args.input))
    else:
        print(b64decode(args.input))
    return 0


COMMANDS = {
    'generate': run_generate,
    'md5': run_md5,
    'base64': run_base64,
}


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Basic logging setup
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s,%(levelname)s,%(name)s,%(message)s",
    )

    try:
        logger.debug("CLI,%s,START", args.command.upper())
        status = COMMANDS[args.command](args)
        logger.debug("CLI,%s,END,status=%d", args.command.upper(), status)
        return status
    except (FileGenException, OSError, ValueError) as e:
        logger.exception("CLI,%s,ERROR,%s", args.command.upper(), e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
