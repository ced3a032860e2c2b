"""Common literal values used across inkpress.

These constants keep metadata keys and markup delimiters centralized so the
compiler, the site builder, templates, and tests can import the same values
without drifting. Intended for internal use within the inkpress package.

Examples
--------
>>> from inkpress import _constants
>>> _constants.TEMPLATE_KEY
'template'
>>> len(_constants.RAW_DELIMITER)
4
"""

TEMPLATE_KEY = "template"
PATH_KEY = "path"
CONTENT_KEY = "content"

RAW_DELIMITER = "++++"
RAW_DELIMITER_WIDTH = len(RAW_DELIMITER)

DEFAULT_DOCUMENT_EXTENSION = "md"
DEFAULT_OUTPUT_DIR = "output"
DEFAULT_CONFIG_NAME = "inkpress.yaml"
