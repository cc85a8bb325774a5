from typing import Iterable, List, Union

import ccdeps.utils


def remove_paths(paths: List[str], remove: Union[str, Iterable[str]]) -> List[str]:
    """Drop every path that starts with one of the prefixes in remove.

    The list is compacted in place and returned.  Survivors keep their
    relative order and duplicates are kept.  The test is a plain string
    prefix so "/usr/include" also removes "/usr/include2/foo.h".
    """
    if ccdeps.utils.is_nonstr_iter(remove):
        prefixes = tuple(remove)
    else:
        prefixes = (remove,)

    out = 0
    for candidate in paths:
        if prefixes and candidate.startswith(prefixes):
            continue
        paths[out] = candidate
        out += 1
    del paths[out:]
    return paths
