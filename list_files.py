"""
Find the largest files in a list of files and folders given on the command line.

Options apply to the file or folder names that follow them:
-n#  number of large files to report (1 to 999, default 5)
-s0  do only the given files or folders, no subfolders
-s1  (or -s) process files, folders and subfolders (default)
-q   only report problems on stderr

The report goes to stdout, smallest of the kept files first; progress and
problems go to stderr.

sample usage:

python3 list_files.py -n10 /home/rahul/movies -s0 /home/rahul
"""

import argparse
import locale
import logging
import os
import sys

from top_n import TopN
from walker import WalkContext, visit


PROGRAM_TITLE = 'Find Largest Files in Folder, Subfolders'
DEFAULT_NUMBER = 5
MIN_NUMBER = 1
MAX_NUMBER = 999

log = logging.getLogger('list_files')


def format_count(number):
    # digit grouping of the current locale, 85,732 in en_US
    return f'{number:n}'


class HelpAction(argparse.Action):
    """Print the help summary on stderr, keeping stdout for the report."""

    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None):
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help(sys.stderr)
        parser.exit()


def build_parser():
    # names are not declared here, parse_command_line picks them out in order
    parser = argparse.ArgumentParser(
        prog='largest-files',
        usage='%(prog)s [options] fileOrFolderNames...',
        description=PROGRAM_TITLE,
        epilog='Options apply to the names after them. Output may be redirected with the ">" operator.',
        add_help=False,
    )
    parser.add_argument('-?', '-h', '-help', '--help', action=HelpAction,
                        help='show summary of command-line syntax')
    parser.add_argument('-n', dest='number', metavar='#', type=int,
                        help=f'number of large files to report; default is -n{DEFAULT_NUMBER}')
    parser.add_argument('-s', '-s1', dest='recurse', action='store_const', const=True,
                        help='process files, folders, and subfolders (default)')
    parser.add_argument('-s0', dest='recurse', action='store_const', const=False,
                        help='do only given files or folders, no subfolders')
    parser.add_argument('-q', dest='quiet', action='store_const', const=True,
                        help='only log problems, not every folder scanned')
    return parser


def normalize_args(argv, mswin=False):
    """Lower-case options, accept /x for -x on Windows and drop empty arguments."""
    args = []
    for arg in argv:
        if not arg:
            continue
        if arg == '?':
            arg = '-?'
        elif mswin and arg.startswith('/'):
            arg = '-' + arg[1:]
        if arg.startswith('-'):
            arg = arg.lower()
        args.append(arg)
    return args


def parse_command_line(parser, argv, mswin=False):
    """Read arguments left to right.

    Returns the options and a list of (name, recurse) pairs, where recurse is
    whatever -s0/-s1 said last before that name. The last -n wins.
    """
    options = argparse.Namespace(number=DEFAULT_NUMBER, recurse=True, quiet=False)
    targets = []
    for arg in normalize_args(argv, mswin=mswin):
        if arg.startswith('-'):
            parser.parse_args([arg], namespace=options)
        else:
            targets.append((arg, options.recurse))

    if not MIN_NUMBER <= options.number <= MAX_NUMBER:
        parser.error(f'number of large files to report must be from {MIN_NUMBER} to {MAX_NUMBER}: -n{options.number}')
    return options, targets


def setup_logging(quiet=False):
    logging.basicConfig(format='%(message)s', stream=sys.stderr)
    logging.getLogger().setLevel(logging.WARNING if quiet else logging.INFO)


def largest_files(n, targets):
    """Walk every (name, recurse) target and return the WalkContext holding the n largest files."""
    context = WalkContext(TopN(n))
    for target, recurse in targets:
        context.recurse = recurse
        try:
            visit(target, context)
        except Exception:
            log.exception('Error processing %s', target)
    return context


def write_line(out, text):
    try:
        print(text, file=out)
    except UnicodeEncodeError:
        # file names that are not valid in the filesystem encoding come back
        # as surrogate escapes, write their original bytes
        out.flush()
        out.buffer.write(os.fsencode(text + '\n'))
        out.buffer.flush()


def print_report(context, out=None):
    out = out or sys.stdout
    entries = context.tracker.results()
    write_line(out, '')
    write_line(out, f'Found {len(entries)} largest files from {format_count(context.total_files)} files '
                    f'in {format_count(context.total_folders)} folders.')
    for entry in entries:
        write_line(out, f'  {format_count(entry.size)} bytes for {entry.path}')


def main(argv=None, mswin=None):
    if argv is None:
        argv = sys.argv[1:]
    if mswin is None:
        mswin = os.name == 'nt'

    parser = build_parser()
    options, targets = parse_command_line(parser, argv, mswin=mswin)

    setup_logging(options.quiet)

    context = largest_files(options.number, targets)
    print_report(context)

    if not (context.total_files or context.total_folders):
        # nothing given or nothing found
        parser.print_help(sys.stderr)
    return 0


def cli():
    try:
        locale.setlocale(locale.LC_ALL, '')
    except locale.Error:
        pass
    sys.exit(main())


if __name__ == '__main__':
    cli()
