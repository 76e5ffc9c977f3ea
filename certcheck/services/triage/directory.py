"""Certificate directory layout and file relocation."""

import errno
import os
import shutil
import tempfile
from pathlib import Path

import structlog

from certcheck.core.exceptions import DirectoryError, TransitionError

logger = structlog.get_logger()

# os.link() failures that mean "no hard link possible here", not "cannot move"
_NO_LINK_ERRNOS = {errno.EXDEV, errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP, errno.EMLINK}


class CertificateDirectories:
    """The three directories a run works with.

    Layout:
        initial/   new certificates, promoted to regular/ once valid
        regular/   certificates in service, checked on every run
        invalid/   certificates that failed a check (unless keep_failed)

    A file's directory after a run is the only record of its outcome.
    """

    def __init__(self, initial: str | Path, regular: str | Path, invalid: str | Path):
        self._initial = Path(initial)
        self._regular = Path(regular)
        self._invalid = Path(invalid)

    @classmethod
    def from_settings(cls, settings) -> "CertificateDirectories":
        return cls(
            initial=settings.certcheck_initial_dir,
            regular=settings.certcheck_regular_dir,
            invalid=settings.certcheck_invalid_dir,
        )

    @property
    def initial(self) -> Path:
        return self._initial

    @property
    def regular(self) -> Path:
        return self._regular

    @property
    def invalid(self) -> Path:
        return self._invalid


def list_certificate_files(directory: Path) -> list[Path]:
    """Regular files directly under ``directory``, snapshotted once. No recursion."""
    directory = Path(directory)
    try:
        with os.scandir(directory) as entries:
            return sorted(Path(e.path) for e in entries if e.is_file())
    except NotADirectoryError:
        raise DirectoryError(str(directory), "not a directory")
    except FileNotFoundError:
        raise DirectoryError(str(directory), "directory does not exist")
    except OSError as e:
        raise DirectoryError(str(directory), e.strerror or str(e))


def move_certificate(source: Path, destination_dir: Path) -> Path:
    """Move ``source`` into ``destination_dir`` keeping its base name.

    An existing file of the same name at the destination is never
    overwritten; the move fails and ``source`` stays where it is. The file
    ends up in exactly one of the two directories whether or not the move
    succeeds.

    Within one filesystem the move is a hard link followed by an unlink of
    the source. Across filesystems the content is copied to a hidden
    temporary file in ``destination_dir`` first and linked into place once
    complete, so a partial copy never appears under the final name.
    """
    source = Path(source)
    destination_dir = Path(destination_dir)
    target = destination_dir / source.name

    if not destination_dir.is_dir():
        raise TransitionError(str(source), str(target), "destination directory does not exist")

    try:
        os.link(source, target)
    except FileExistsError:
        raise TransitionError(str(source), str(target), "destination file already exists")
    except OSError as e:
        if e.errno not in _NO_LINK_ERRNOS:
            raise TransitionError(str(source), str(target), e.strerror or str(e))
        _copy_into_place(source, target)

    try:
        os.unlink(source)
    except FileNotFoundError:
        # source vanished after the link; target is now the only copy
        logger.warning("certificate_source_vanished", source=str(source), target=str(target))
    except OSError as e:
        _discard(target)
        raise TransitionError(str(source), str(target), e.strerror or str(e))
    return target


def _copy_into_place(source: Path, target: Path) -> None:
    try:
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".partial")
    except OSError as e:
        raise TransitionError(str(source), str(target), e.strerror or str(e))

    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as dst, open(source, "rb") as src:
            shutil.copyfileobj(src, dst)
            dst.flush()
            os.fsync(dst.fileno())
        shutil.copystat(source, tmp)
        _link_or_rename(tmp, target)
    except FileExistsError:
        raise TransitionError(str(source), str(target), "destination file already exists")
    except OSError as e:
        raise TransitionError(str(source), str(target), e.strerror or str(e))
    finally:
        _discard(tmp)


def _discard(path: Path) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.error("file_cleanup_failed", path=str(path), exc_info=True)


def _link_or_rename(tmp: Path, target: Path) -> None:
    try:
        os.link(tmp, target)
    except FileExistsError:
        raise
    except OSError as e:
        if e.errno not in _NO_LINK_ERRNOS:
            raise
        # no hard links on this filesystem; rename is the closest fallback
        if target.exists():
            raise FileExistsError(errno.EEXIST, "File exists", str(target))
        os.rename(tmp, target)
