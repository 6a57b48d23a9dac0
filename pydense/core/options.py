"""
Option model.

Every operation accepts an open set of keyword options. This module knows
the name, kind and default of every option any operation recognizes, and
assembles the caller's overrides into an OptionSet. It validates structure
only (known name, value of the right kind); whether the values are
consistent with the operands is decided later by shape resolution and
bounds validation.

Sentinels:
    - Dimensions (m, n, k, nrhs): negative or None means "derive"
    - Strides (ldA, ldB, ldC): 0 or None means "derive"
    - Offsets (offsetA, offsetB, offsetC): default 0; None means 0
"""

from dataclasses import dataclass
from typing import Any, Mapping

from pydense.core.exceptions import ConfigurationError
from pydense.core.validation import check_choice, check_int_option

DIMENSION_OPTIONS = ('m', 'n', 'k', 'nrhs')
STRIDE_OPTIONS = ('ldA', 'ldB', 'ldC')
OFFSET_OPTIONS = ('offsetA', 'offsetB', 'offsetC')

TRANS_CHOICES = ('N', 'T', 'C')
SIDE_CHOICES = ('L', 'R')
UPLO_CHOICES = ('L', 'U')
DIAG_CHOICES = ('N', 'U')

MODE_OPTIONS: dict[str, tuple[str, ...]] = {
    'transA': TRANS_CHOICES,
    'transB': TRANS_CHOICES,
    'trans': TRANS_CHOICES,
    'side': SIDE_CHOICES,
    'uplo': UPLO_CHOICES,
    'diag': DIAG_CHOICES,
}

OPTION_DEFAULTS: dict[str, Any] = {
    **{name: -1 for name in DIMENSION_OPTIONS},
    **{name: 0 for name in STRIDE_OPTIONS},
    **{name: 0 for name in OFFSET_OPTIONS},
    **{name: choices[0] for name, choices in MODE_OPTIONS.items()},
}


@dataclass(frozen=True)
class OptionSet:
    """
    Populated option set for one call.

    Holds a value for every option the operation accepts: either the
    caller's value or the default sentinel.

    Attributes:
        values: Option name -> value
    """
    values: Mapping[str, Any]

    def __getitem__(self, name: str) -> Any:
        if name not in self.values:
            raise KeyError(
                f"option {name!r} is not accepted here. Available: {sorted(self.values)}"
            )
        return self.values[name]


def build_options(
    operation: str,
    accepted: frozenset[str],
    overrides: Mapping[str, Any],
) -> OptionSet:
    """
    Assemble an OptionSet from caller overrides.

    Args:
        operation: Operation name for error messages
        accepted: Option names the operation recognizes
        overrides: Caller keyword options

    Returns:
        OptionSet with a value for every accepted option

    Raises:
        ConfigurationError: If an option is unknown to the operation or its
            value has the wrong kind
    """
    unknown = sorted(set(overrides) - accepted)
    if unknown:
        raise ConfigurationError(
            f"{operation}: unrecognized option(s) {unknown}. Accepted: {sorted(accepted)}"
        )

    values = {name: OPTION_DEFAULTS[name] for name in accepted}
    for name, value in overrides.items():
        if value is None:
            values[name] = OPTION_DEFAULTS[name]
        elif name in MODE_OPTIONS:
            values[name] = check_choice(value, MODE_OPTIONS[name], f"{operation}: {name}")
        else:
            values[name] = check_int_option(value, f"{operation}: {name}")

    return OptionSet(values=values)
