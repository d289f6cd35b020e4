"""Site ops - dependency install, publishing and preview packaging for the blog."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())
