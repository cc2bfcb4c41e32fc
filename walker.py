# Walk files and folders depth first, feeding every file to a TopN tracker.

import enum
import logging
import os
import stat

from top_n import TopN


log = logging.getLogger(__name__)


class Kind(enum.Enum):
    FILE = 'file'
    FOLDER = 'folder'
    OTHER = 'other'


class WalkContext:
    """State shared by one walk: the tracker, the recurse flag and counters."""

    def __init__(self, tracker: TopN, recurse=True):
        self.tracker = tracker
        self.recurse = recurse
        self.total_files = 0
        self.total_folders = 0


def classify(path):
    """Return (kind, stat_result) for path, following symbolic links.

    Anything that cannot be stat'ed (missing, broken link, bad name) is
    Kind.OTHER with a None stat result.
    """
    try:
        st = os.stat(path)
    except (OSError, ValueError):
        return Kind.OTHER, None

    if stat.S_ISDIR(st.st_mode):
        return Kind.FOLDER, st
    if stat.S_ISREG(st.st_mode):
        return Kind.FILE, st
    return Kind.OTHER, st


def canonical_path(path):
    try:
        return os.path.realpath(path)
    except (OSError, ValueError):
        return path


def list_folder(path):
    """Direct children of a folder in the order the OS returns them.

    An unreadable folder is logged and treated as empty.
    """
    try:
        with os.scandir(path) as it:
            return list(it)
    except OSError as ex:
        log.warning('Protected folder: %s (%s)', path, ex.strerror or ex)
        return []


def _child_kind(child: os.DirEntry):
    try:
        if child.is_dir():
            return Kind.FOLDER
        if child.is_file():
            return Kind.FILE
    except OSError:
        pass
    return Kind.OTHER


def _is_link(child: os.DirEntry):
    try:
        return child.is_symlink()
    except OSError:
        return False


def visit(target, context: WalkContext):
    kind, st = classify(target)

    if kind is Kind.FOLDER:
        _visit_folder(target, context)
    elif kind is Kind.FILE:
        _visit_file(target, st.st_size, context)
    else:
        log.warning('Not a file or folder: %s', target)


def _visit_folder(folder, context: WalkContext):
    context.total_folders += 1
    log.info('Scanning folder: %s', folder)

    for child in list_folder(folder):
        kind = _child_kind(child)

        if kind is Kind.FOLDER:
            if _is_link(child):
                log.info('Ignoring linked folder: %s', child.path)
            elif context.recurse:
                _visit_child(child.path, context)
            else:
                log.info('Ignoring subfolder: %s', child.path)
        elif kind is Kind.FILE:
            _visit_child(child.path, context)


def _visit_child(path, context: WalkContext):
    try:
        visit(path, context)
    except RecursionError:
        # only the part of the tree below this point is lost
        log.warning('Nested too deeply, skipped: %s', path)


def _visit_file(path, size, context: WalkContext):
    context.total_files += 1

    # no need to resolve paths the tracker would reject
    if context.tracker.accepts(size):
        context.tracker.observe(canonical_path(path), size)
