"""
Shared configuration for adversarial tests.

Abuse scenarios run against the stand-in backend from the root conftest,
through the same HTTP surface as the integration suite.
"""

import pytest

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial
