"""
L{configargparse} config file parsers for project files.

Options can be given in a section of C{pyproject.toml} (TOML) or of
C{setup.cfg}/C{rbdoctor.ini} (INI).  Unlike the parsers that come with
configargparse, these only read the sections they are bound to.

>>> sections = ['tool.rbdoctor', 'tool:rbdoctor', 'rbdoctor']
>>> parser = ArgumentParser(..., default_config_files=['./pyproject.toml', './setup.cfg'],
...             config_file_parser_class=CompositeConfigParser(
...                 [TomlConfigParser(sections), IniConfigParser(sections)]))
"""
import argparse
import configparser
import warnings
from ast import literal_eval
from collections import OrderedDict
from typing import Any, Callable, Dict, List, Optional, TextIO, Union

from configargparse import ArgumentParser, ConfigFileParser, ConfigFileParserException
import toml

def get_toml_section(data: Dict[str, Any], section: str) -> Optional[Dict[str, Any]]:
    """
    Get a dotted section (like C{"tool.rbdoctor"}) of loaded TOML data.
    Returns C{None} if the section is not found.
    """
    item: Any = data
    for name in section.split('.'):
        if not isinstance(item, dict):
            return None
        item = item.get(name.strip().strip('"\''))
    if not isinstance(item, dict):
        return None
    return item

class TomlConfigParser(ConfigFileParser):
    """
    TOML parser for C{pyproject.toml} like files::

        [tool.rbdoctor]
        line-numbers = true
        class-prefix = "rb-"
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        try:
            config = toml.load(stream)
        except Exception as e:
            raise ConfigFileParserException("Couldn't parse TOML file: %s" % e)

        result: Dict[str, Any] = OrderedDict()
        for section in self.sections:
            data = get_toml_section(config, section)
            if data:
                # Values go back through argparse, which wants strings.
                for key, value in data.items():
                    if isinstance(value, list):
                        result[key] = [str(i) for i in value]
                    elif isinstance(value, bool):
                        result[key] = str(value).lower()
                    elif value is not None:
                        result[key] = str(value)
                break
        return result

    def get_syntax_description(self) -> str:
        return ("Config file syntax is Tom's Obvious, Minimal Language. "
                "See https://toml.io/ for details.")

class IniConfigParser(ConfigFileParser):
    """
    INI parser for C{setup.cfg} like files::

        [tool:rbdoctor]
        line-numbers = true
        class-prefix = rb-

    Values written with the python list syntax are evaluated to lists.
    """

    def __init__(self, sections: List[str]) -> None:
        super().__init__()
        self.sections = sections

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        config = configparser.ConfigParser()
        try:
            config.read_string(stream.read())
        except Exception as e:
            raise ConfigFileParserException("Couldn't parse INI file: %s" % e)

        result: Dict[str, Union[str, List[str]]] = OrderedDict()
        for section in config.sections():
            if section not in self.sections:
                continue
            for key, value in config[section].items():
                if value.startswith('[') and value.endswith(']'):
                    try:
                        l = literal_eval(value)
                        assert isinstance(l, list)
                    except Exception as e:
                        raise ConfigFileParserException(f"Error evaluating list: {e}") from e
                    result[key] = [str(i) for i in l]
                else:
                    result[key] = value
        return result

    def get_syntax_description(self) -> str:
        return ("Uses configparser module to parse an INI file. "
                "See https://docs.python.org/3/library/configparser.html for details.")

class CompositeConfigParser(ConfigFileParser):
    """
    Tries each parser in turn until one succeeds.
    """

    def __init__(self, config_parser_types: List[Callable[[], ConfigFileParser]]) -> None:
        super().__init__()
        self.parsers = [p() for p in config_parser_types]

    def __call__(self) -> ConfigFileParser:
        return self

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        errors = []
        for p in self.parsers:
            try:
                return p.parse(stream) # type: ignore[no-any-return]
            except Exception as e:
                stream.seek(0)
                errors.append(e)
        raise ConfigFileParserException(
                f"Error parsing config: {', '.join(repr(str(e)) for e in errors)}")

    def get_syntax_description(self) -> str:
        return ' '.join(f"[{i+1}] {p.__class__.__name__}: {p.get_syntax_description()}"
                        for i, p in enumerate(self.parsers))

class ValidatorParser(ConfigFileParser):
    """
    Wraps a parser and warns about (then drops) keys that match no option.

    Install it after creating the L{ArgumentParser}::

        parser._config_file_parser = ValidatorParser(parser._config_file_parser, parser)
    """

    def __init__(self, config_parser: ConfigFileParser, argument_parser: ArgumentParser) -> None:
        super().__init__()
        self.config_parser = config_parser
        self.argument_parser = argument_parser

    def get_syntax_description(self) -> str:
        return self.config_parser.get_syntax_description() #type:ignore[no-any-return]

    def parse(self, stream: TextIO) -> Dict[str, Any]:
        data: Dict[str, Any] = self.config_parser.parse(stream)

        known_config_keys: Dict[str, argparse.Action] = {
            config_key: action for action in self.argument_parser._actions
            for config_key in self.argument_parser.get_possible_config_keys(action)}

        new_data = {}
        for key, value in data.items():
            if key not in known_config_keys:
                warnings.warn(f"No such config option: {key!r}")
            else:
                new_data[key] = value
        return new_data
