"""Common literal values used across honkit_tester.

These constants keep the HonKit book layout in one place so the scaffolder,
installers, and output processor agree on filenames. Intended for internal use
within the honkit_tester package.

Examples
--------
>>> from honkit_tester import _constants
>>> _constants.HONKIT_ENTRY_POINT
('honkit', 'bin', 'honkit.js')
>>> _constants.PLUGIN_PACKAGE_PREFIXES[0]
'gitbook-plugin-'
"""

README_FILENAME = "README.md"
SUMMARY_FILENAME = "SUMMARY.md"
BOOK_JSON_FILENAME = "book.json"
PACKAGE_JSON_FILENAME = "package.json"
NODE_MODULES_DIRNAME = "node_modules"
OUTPUT_DIRNAME = "_book"

HONKIT_ENTRY_POINT = ("honkit", "bin", "honkit.js")

PLUGIN_PACKAGE_PREFIXES = ("gitbook-plugin-", "honkit-plugin-")

TEMP_DIR_PREFIX = "honkit-tester-"
DEBUG_ENV_VAR = "DEBUG"
