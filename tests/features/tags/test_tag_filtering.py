"""BDD tests for tag filtering of discovered metrics.

Step definitions are in conftest.py.
"""

import pytest
from pytest_bdd import scenarios

scenarios("tag_filtering.feature")

pytestmark = [pytest.mark.tier(2)]
