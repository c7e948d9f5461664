"""The entry point."""

from typing import List, Optional, Sequence, TextIO
import logging
import sys
from pathlib import Path

from rbdoctor.markup import markup_code
from rbdoctor.options import Options
from rbdoctor.tokens import Token, TokenLoadError, load_tokens
from rbdoctor.tokenstream import TokenStyles, to_html
from rbdoctor.utils import error

logger = logging.getLogger('rbdoctor')

def _log_level(verbosity: int) -> int:
    if verbosity < 0:
        return logging.ERROR
    elif verbosity == 0:
        return logging.WARNING
    elif verbosity == 1:
        return logging.INFO
    return logging.DEBUG

def setup_logging(verbosity: int, stream: Optional[TextIO] = None) -> logging.Handler:
    """
    Send rbdoctor's log records to C{stream} (standard error by default),
    at a level that follows the verbosity.
    """
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(handler)
    logger.setLevel(_log_level(verbosity))
    return handler

def read_tokens(path: Path) -> List[Optional[Token]]:
    """
    Load a token dump.

    Watch out, prints a message and SystemExits on error!
    """
    try:
        with path.open(encoding='utf-8') as f:
            return load_tokens(f)
    except OSError as e:
        error(f"{path}: cannot read token dump: {e.strerror}")
    except TokenLoadError as e:
        error(f"{path}: {e}")

def render(tokens: List[Optional[Token]], options: Options) -> str:
    """
    Render the tokens of one dump as configured in the options.
    """
    styles = TokenStyles(prefix=options.classprefix)
    if options.nodedent:
        if options.linenumbers:
            logger.warning("--line-numbers has no effect with --no-dedent")
        html = to_html(tokens, styles)
    else:
        html = markup_code(tokens, line_numbers=options.linenumbers, styles=styles)
    if options.pre:
        return f'<pre class="ruby">{html}</pre>'
    return html

def make(options: Options) -> str:
    """
    Render all the token dumps given in the options.
    """
    fragments = []
    for path in options.tokenfiles:
        logger.info("rendering %s", path)
        tokens = read_tokens(path)
        fragments.append(render(tokens, options))
    return ''.join(fragments)

def main(args: Sequence[str] = sys.argv[1:]) -> int:
    """
    This is the console_scripts entry point for rbdoctor CLI.

    @param args: Command line arguments to run the CLI.
    """
    options = Options.from_args(args)
    handler = setup_logging(options.verbosity)

    try:
        # Check that we're actually going to accomplish something here
        if not options.tokenfiles:
            error("No token files given.")

        html = make(options)

        if options.output is None:
            sys.stdout.write(html)
        else:
            logger.info("writing html to %s", options.output)
            options.output.parent.mkdir(parents=True, exist_ok=True)
            options.output.write_text(html, encoding='utf-8')

    except Exception:
        if options.pdb:
            import pdb
            pdb.post_mortem(sys.exc_info()[2])
        raise
    finally:
        logger.removeHandler(handler)

    return 0
