"""
The command-line parsing.
"""
from argparse import Namespace
from pathlib import Path
from typing import List, Optional, Sequence

from configargparse import ArgumentParser
import attr

from rbdoctor import __version__
from rbdoctor.utils import parse_path
from rbdoctor._configparser import CompositeConfigParser, IniConfigParser, TomlConfigParser, ValidatorParser

DEFAULT_CONFIG_FILES = ['./pyproject.toml', './setup.cfg', './rbdoctor.ini']
CONFIG_SECTIONS = ['tool.rbdoctor', 'tool:rbdoctor', 'rbdoctor']

__all__ = ("Options", )

# CONFIGURATION PARSING

RbdoctorConfigParser = CompositeConfigParser(
                [TomlConfigParser(CONFIG_SECTIONS),
                 IniConfigParser(CONFIG_SECTIONS)])

# ARGUMENTS PARSING

def get_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='rbdoctor',
        description="Highlight Ruby token streams as HTML.",
        usage="rbdoctor [options] TOKENFILE...",
        default_config_files=DEFAULT_CONFIG_FILES,
        config_file_parser_class=RbdoctorConfigParser)

    # Add the validator to the config file parser, this is arguably a hack.
    parser._config_file_parser = ValidatorParser(parser._config_file_parser, parser)

    parser.add_argument(
        '-c', '--config', is_config_file=True,
        help=("Load config from this file (any command line "
              "options override settings from the file)."), metavar="PATH",)
    parser.add_argument(
        '-o', '--output', dest='output', metavar='PATH', default=None,
        help=("File to write the HTML to (default: standard output)."))
    parser.add_argument(
        '--line-numbers', dest='linenumbers', action='store_true', default=False,
        help=("Number the source lines. Token dumps must start with a "
              "'# File <name>, line <n>' comment for this to have an effect."))
    parser.add_argument(
        '--no-dedent', dest='nodedent', action='store_true', default=False,
        help=("Render the tokens as is, without removing the common indentation."))
    parser.add_argument(
        '--pre', dest='pre', action='store_true', default=False,
        help=("Wrap each listing in a <pre class=\"ruby\"> element."))
    parser.add_argument(
        '--class-prefix', dest='classprefix', default='ruby-', metavar='PREFIX',
        help=("Prefix of the CSS class names (default 'ruby-')."))
    parser.add_argument(
        '--pdb', dest='pdb', action='store_true',
        help=("Like py.test's --pdb."))
    parser.add_argument(
        '--verbose', '-v', action='count', dest='verbosity',
        default=0,
        help=("Be noisier.  Can be repeated for more noise."))
    parser.add_argument(
        '--quiet', '-q', action='count', dest='quietness',
        default=0,
        help=("Be quieter."))

    parser.add_argument('-V', '--version', action='version', version=f'%(prog)s {__version__}')

    parser.add_argument(
        'tokenfiles', metavar='TOKENFILE',
        help=("JSON token dumps to render."),
        nargs="*", default=[],
    )
    return parser

def parse_args(args: Sequence[str]) -> Namespace:
    parser = get_parser()
    options = parser.parse_args(args)
    assert isinstance(options, Namespace)
    options.verbosity -= options.quietness
    return options

def _convert_tokenfiles(value: List[str]) -> List[Path]:
    return [parse_path(p, opt='TOKENFILE') for p in value]

def _convert_output(value: Optional[str]) -> Optional[Path]:
    return None if value is None else parse_path(value, opt='--output')

# TYPED OPTIONS CONTAINER

@attr.s
class Options:
    """
    Container for all possible rbdoctor options.

    See C{rbdoctor --help} for more informations.
    """
    tokenfiles:     List[Path]      = attr.ib(converter=_convert_tokenfiles)
    output:         Optional[Path]  = attr.ib(converter=_convert_output)
    linenumbers:    bool            = attr.ib()
    nodedent:       bool            = attr.ib()
    pre:            bool            = attr.ib()
    classprefix:    str             = attr.ib()
    pdb:            bool            = attr.ib() # only working via driver.main()
    verbosity:      int             = attr.ib()
    quietness:      int             = attr.ib()

    # HIGH LEVEL FACTORY METHODS

    @classmethod
    def defaults(cls,) -> 'Options':
        return cls.from_args([])

    @classmethod
    def from_args(cls, args: Sequence[str]) -> 'Options':
        return cls.from_namespace(parse_args(args))

    @classmethod
    def from_namespace(cls, args: Namespace) -> 'Options':
        argsdict = vars(args)
        # remove the config argument
        argsdict.pop('config')
        return cls(**argsdict)
