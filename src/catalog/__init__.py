"""Product catalog REST backend.

This package contains the catalog API, the product service and its
repository, database setup and runtime configuration.
"""

__version__ = "0.1.0"
