import math

import pytest

from amrgen.common import util
from amrgen.common.checks import ConfigurationError, check_positive, check_probability
from amrgen.common.testing import AmrGenTestCase


class TestUtil(AmrGenTestCase):
    def test_log_prob(self):
        assert util.log_prob(1.0) == 0.0
        assert util.log_prob(0.5) == pytest.approx(math.log(0.5))
        assert util.log_prob(0.0) == -math.inf

    def test_min_log_prob_is_finite_and_smallest(self):
        assert math.isfinite(util.MIN_LOG_PROB)
        assert util.MIN_LOG_PROB < math.log(1e-300)

    def test_collapse_spaces(self):
        assert util.collapse_spaces("  the  boy \t wants ") == "the boy wants"
        assert util.collapse_spaces("   ") == ""

    def test_checks(self):
        check_probability(0.0, "p")
        check_probability(1.0, "p")
        with pytest.raises(ConfigurationError, match="p must be a probability"):
            check_probability(1.1, "p")
        check_positive(1, "n")
        with pytest.raises(ConfigurationError, match="n must be at least 1"):
            check_positive(0, "n")
