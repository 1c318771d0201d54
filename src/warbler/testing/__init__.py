"""Test utilities for warbler applications.

::

    from warbler.testing import TestClient, encode_multipart
"""

from warbler.testing.client import TestClient
from warbler.testing.multipart import encode_multipart

__all__ = ["TestClient", "encode_multipart"]
