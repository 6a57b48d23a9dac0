"""
Tests for the option model.

Validates:
    - Every accepted option gets its default sentinel
    - Unknown names and malformed values raise ConfigurationError
    - None means "use the default"
    - OptionSet lookup
"""

import numpy as np
import pytest

from pydense.core.exceptions import ConfigurationError
from pydense.core.options import OPTION_DEFAULTS, OptionSet, build_options

GEMM_OPTIONS = frozenset({
    'transA', 'transB', 'm', 'n', 'k',
    'ldA', 'ldB', 'ldC', 'offsetA', 'offsetB', 'offsetC',
})


class TestDefaults:

    def test_all_defaults(self):
        options = build_options('gemm', GEMM_OPTIONS, {})
        assert options['m'] == -1
        assert options['k'] == -1
        assert options['ldA'] == 0
        assert options['offsetC'] == 0
        assert options['transA'] == 'N'

    def test_mode_defaults(self):
        assert OPTION_DEFAULTS['side'] == 'L'
        assert OPTION_DEFAULTS['uplo'] == 'L'
        assert OPTION_DEFAULTS['diag'] == 'N'
        assert OPTION_DEFAULTS['trans'] == 'N'

    def test_none_means_default(self):
        options = build_options('gemm', GEMM_OPTIONS, {'m': None, 'transA': None, 'ldB': None})
        assert options['m'] == -1
        assert options['transA'] == 'N'
        assert options['ldB'] == 0


class TestOverrides:

    def test_explicit_values(self):
        options = build_options('gemm', GEMM_OPTIONS, {'m': 3, 'transB': 'T', 'ldC': np.int64(5)})
        assert options['m'] == 3
        assert options['transB'] == 'T'
        assert options['ldC'] == 5

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError, match="side"):
            build_options('gemm', GEMM_OPTIONS, {'side': 'L'})

    def test_misspelled_option(self):
        with pytest.raises(ConfigurationError, match="unrecognized"):
            build_options('gemm', GEMM_OPTIONS, {'lda': 3})

    def test_bad_letter(self):
        with pytest.raises(ConfigurationError, match="transA"):
            build_options('gemm', GEMM_OPTIONS, {'transA': 'X'})

    def test_non_integer_dimension(self):
        with pytest.raises(ConfigurationError, match="k"):
            build_options('gemm', GEMM_OPTIONS, {'k': 1.5})


class TestOptionSet:

    def test_missing_name_lists_available(self):
        options = build_options('gemm', GEMM_OPTIONS, {})
        with pytest.raises(KeyError, match="uplo"):
            options['uplo']

    def test_frozen(self):
        options = OptionSet(values={'m': 1})
        with pytest.raises(AttributeError):
            options.values = {}
