"""rbdoctor, HTML highlighting of Ruby token streams for API documentation.

The token stream of an entity is collected with L{rbdoctor.tokenstream.TokenStream}
and rendered with L{rbdoctor.tokenstream.to_html}.
"""

import importlib.metadata as importlib_metadata

__version__ = importlib_metadata.version('rbdoctor')

__all__ = ["__version__"]
