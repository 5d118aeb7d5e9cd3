"""skill-router: BM25 routing of messages to the skills that can handle them."""

__version__ = "0.1.0"

# Bumped whenever the on-disk snapshot shape changes.
INDEX_VERSION = 1
