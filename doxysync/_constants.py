"""Common literal values used across doxysync.

These constants keep placeholder schemes and output filenames centralized so
the transcoder, the resolvers, templates and tests import the same values
without drifting. Intended for internal use within the doxysync package.

Examples
--------
>>> from doxysync import _constants
>>> _constants.REF_PLACEHOLDER.format(refid="classFoo")
'refid://classFoo'
>>> _constants.PAGE_FILENAME_TEMPLATE.format(refid="foo_8h")
'foo_8h.html'
"""

REF_SCHEME = "refid://"
IMAGE_SCHEME = "doxyimg://"
REF_PLACEHOLDER = REF_SCHEME + "{refid}"
IMAGE_PLACEHOLDER = IMAGE_SCHEME + "{path}"
NOT_FOUND_HREF = "#not-found"

PAGE_FILENAME_TEMPLATE = "{refid}.html"
INDEX_DOCUMENT = "index.xml"
NAV_SCRIPT_FILENAME = "nav.js"
IMAGES_DIRNAME = "images"
PYGMENTS_CSS_FILENAME = "pygments.css"
LANDING_PAGE_FILENAME = "index.html"

DEFAULT_MATH_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-chtml.js"
