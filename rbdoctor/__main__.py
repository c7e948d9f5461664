"""Run rbdoctor with C{python -m rbdoctor}."""
import sys

from rbdoctor.driver import main

sys.exit(main(sys.argv[1:]))
