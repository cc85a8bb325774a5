""" Wrap and memoize a variety of os calls """
import functools
import os
import posixpath


@functools.lru_cache(maxsize=None)
def isfile(trialpath):
    """ Cached version of os.path.isfile """
    return os.path.isfile(trialpath)


def isc(trialpath):
    """ Is the given file a C file ? """
    return os.path.splitext(trialpath)[1] == ".c"


def cleanpath(trialpath):
    """ Lexically tidy a path.  Redundant separators and "." segments are
        removed and ".." is resolved against the preceding segment.
        The filesystem is never consulted so symlinks are left alone.
    """
    if not trialpath:
        return "."
    cleaned = posixpath.normpath(trialpath)
    # POSIX lets normpath keep exactly two leading slashes
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def clear_cache():
    isfile.cache_clear()
