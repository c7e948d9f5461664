"""
Utilities related to Stan tree flattening.
"""
from typing import List, Union, TYPE_CHECKING

from twisted.web.template import Tag, flattenString
from twisted.python.failure import Failure

if TYPE_CHECKING:
    from twisted.web.template import Flattenable

def flatten(stan: "Flattenable") -> str:
    """
    Convert a document fragment from a Stan tree to HTML.

    Text is escaped by the flattener: C{&}, C{<} and C{>} in text nodes,
    quotes as well in attribute values.

    @param stan: Document fragment to flatten.
    @return: An HTML string representation of the C{stan} tree.
    """
    ret: List[bytes] = []
    err: List[Failure] = []
    flattenString(None, stan).addCallback(ret.append).addErrback(err.append)
    if err:
        raise err[0].value
    else:
        return ret[0].decode()

def flatten_text(stan: Union[Tag, str, List[Union[Tag, str]]]) -> str:
    """Return the text inside a stan tree, without any markup."""
    if isinstance(stan, str):
        return stan
    if isinstance(stan, list):
        return ''.join(flatten_text(child) for child in stan)
    return ''.join(flatten_text(child) for child in stan.children
                   if isinstance(child, (str, Tag, list)))
