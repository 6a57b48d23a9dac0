"""
Resolve-validate-dispatch pipeline.

Every operation (gemm, symm, ..., gesv) is described by a small Family
descriptor: which operands it takes, how its dimensions default from the
operand shapes, which block of each operand the kernel touches, and which
kernel routine serves each numeric domain. One generic pipeline runs all
of them:

    1. Option model      caller overrides -> OptionSet
    2. Shape resolution  derive unset dimensions (no-op exit when empty)
    3. Bounds            strides, offsets, storage sizes
    4. Type dispatch     shared numeric domain -> routine name
    5. Scalar coercion   alpha/beta into the domain
    6. Kernel            call the routine, map its status

Shape resolution and bounds validation are domain-agnostic; the domain
first matters at step 4.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from pydense.core.compute.timing import Timer
from pydense.core.domain import NumericDomain, common_domain, normalize_trans
from pydense.core.exceptions import ConfigurationError, KernelError, SingularMatrixError
from pydense.core.matrix import DenseMatrix
from pydense.core.options import OptionSet, build_options
from pydense.core.protocols import Kernel, StridedOperand
from pydense.core.result import Result
from pydense.core.scalars import ScalarRule, coerce_scalar
from pydense.core.validation import (
    check_buffer_length,
    check_leading_dimension,
    check_offset,
)

logger = logging.getLogger(__name__)

Dimensions = dict[str, int]
Extent = Callable[[Mapping[str, int], OptionSet], tuple[int, int]]

TRANS_OPTIONS = ('transA', 'transB', 'trans')


@dataclass(frozen=True)
class OperandRule:
    """
    One operand of an operation.

    Attributes:
        role: Operand name ('A', 'B' or 'C'); also names its ld/offset options
        extent: (rows, cols) of the stored block the kernel touches, given
            the resolved dimensions and the options
    """
    role: str
    extent: Extent

    @property
    def ld_option(self) -> str:
        return f"ld{self.role}"

    @property
    def offset_option(self) -> str:
        return f"offset{self.role}"


@dataclass(frozen=True)
class Family:
    """
    Descriptor of one operation family.

    Attributes:
        name: Operation name
        operands: Operand rules in argument order
        dimensions: Dimension options the operation accepts
        modes: Mode options the operation accepts
        derive: Resolves the dimensions from operands and options, raising
            DimensionError when a derived dimension disagrees between operands
        noop_when_zero: Dimensions whose being zero makes the call a no-op
        routines: Domain name ('real'/'complex') -> kernel routine name
        scalars: Scalar rules in argument order
        complex_trans: Letters the 'trans' option may take for complex
            operands, None for no restriction
        singular_status: A positive kernel status means a singular matrix
    """
    name: str
    operands: tuple[OperandRule, ...]
    dimensions: tuple[str, ...]
    modes: tuple[str, ...]
    derive: Callable[[Mapping[str, DenseMatrix], OptionSet], Dimensions]
    noop_when_zero: tuple[str, ...]
    routines: Mapping[str, str]
    scalars: tuple[ScalarRule, ...] = ()
    complex_trans: frozenset[str] | None = None
    singular_status: bool = False

    @property
    def options(self) -> frozenset[str]:
        names = list(self.dimensions) + list(self.modes)
        for rule in self.operands:
            names += [rule.ld_option, rule.offset_option]
        return frozenset(names)

    @property
    def roles(self) -> tuple[str, ...]:
        return tuple(rule.role for rule in self.operands)


@dataclass(frozen=True)
class ResolvedConfig:
    """
    Fully determined call handed to the kernel boundary.

    Fields an operation does not use are None. Built fresh for every call
    and immutable afterwards.
    """
    family: str
    routine: str
    m: int | None = None
    n: int | None = None
    k: int | None = None
    nrhs: int | None = None
    ldA: int | None = None
    ldB: int | None = None
    ldC: int | None = None
    offsetA: int | None = None
    offsetB: int | None = None
    offsetC: int | None = None
    alpha: float | complex | None = None
    beta: float | complex | None = None
    transA: str | None = None
    transB: str | None = None
    trans: str | None = None
    side: str | None = None
    uplo: str | None = None
    diag: str | None = None

    def ld(self, role: str) -> int:
        return getattr(self, f"ld{role}")

    def offset(self, role: str) -> int:
        return getattr(self, f"offset{role}")


@dataclass(frozen=True)
class PreparedCall:
    """A validated call waiting for its kernel."""
    config: ResolvedConfig
    domain: NumericDomain
    family: Family


# === Stages ===

def resolve_dimensions(
    family: Family,
    operands: Mapping[str, DenseMatrix],
    options: OptionSet,
) -> Dimensions:
    """Derive every unset dimension of the call."""
    return family.derive(operands, options)


def is_noop(family: Family, dims: Mapping[str, int]) -> bool:
    """True if a resolved dimension makes the call empty."""
    return any(dims[name] == 0 for name in family.noop_when_zero)


def validate_bounds(
    family: Family,
    operands: Mapping[str, DenseMatrix],
    dims: Mapping[str, int],
    options: OptionSet,
) -> tuple[dict[str, int], dict[str, int]]:
    """
    Resolve the leading strides and check strides, offsets and sizes.

    Checks run in a fixed order so the first violation reported is
    reproducible: every stride (A, B, C), then every offset, then every
    storage size. Operands whose touched block is empty (A and B of a
    product with k == 0) are not read by the kernel and skip the stride
    and size checks.

    Returns:
        (strides, offsets) keyed by option name

    Raises:
        StrideError: If a stride is below max(1, stored rows)
        OffsetError: If an offset is negative
        BufferSizeError: If a buffer cannot hold the touched block
    """
    extents = {rule.role: rule.extent(dims, options) for rule in family.operands}

    strides: dict[str, int] = {}
    for rule in family.operands:
        ld = options[rule.ld_option]
        if ld == 0:
            ld = max(1, operands[rule.role].ld)
        rows, cols = extents[rule.role]
        if ld < 0 or rows * cols > 0:
            check_leading_dimension(ld, rows, rule.ld_option, family.name)
        strides[rule.ld_option] = ld

    offsets: dict[str, int] = {}
    for rule in family.operands:
        offset = options[rule.offset_option]
        check_offset(offset, rule.offset_option, family.name)
        offsets[rule.offset_option] = offset

    for rule in family.operands:
        rows, cols = extents[rule.role]
        if rows * cols == 0:
            continue
        required = offsets[rule.offset_option] + (cols - 1) * strides[rule.ld_option] + rows
        check_buffer_length(operands[rule.role].size, required, rule.role, family.name)

    return strides, offsets


def select_routine(family: Family, domain: NumericDomain) -> str:
    """Kernel routine serving the family in the given domain."""
    return family.routines[domain.name]


def resolve_modes(family: Family, options: OptionSet, domain: NumericDomain) -> dict[str, str]:
    """Mode flags of the call with transpose letters normalized for the domain."""
    modes: dict[str, str] = {}
    for name in family.modes:
        value = options[name]
        if name in TRANS_OPTIONS:
            allowed = family.complex_trans if name == 'trans' else None
            value = normalize_trans(value, domain, allowed, f"{family.name}: {name}")
        modes[name] = value
    return modes


def prepare(
    family: Family,
    operands: Mapping[str, DenseMatrix],
    scalars: Mapping[str, Any],
    overrides: Mapping[str, Any],
    timer: Timer,
    *,
    extra_checks: Callable[[Mapping[str, int]], None] | None = None,
) -> tuple[Dimensions, PreparedCall | None]:
    """
    Run every stage before the kernel.

    Args:
        family: Operation descriptor
        operands: Role -> operand
        scalars: Scalar name -> caller value (None when absent)
        overrides: Caller keyword options
        timer: Timer collecting stage timings
        extra_checks: Called with the resolved dimensions after the bounds
            checks (gesv uses it for the permutation buffer)

    Returns:
        (dimensions, prepared call), with None in place of the call when
        the resolved dimensions make it a no-op
    """
    with timer.section('resolve'):
        options = build_options(family.name, family.options, overrides)
        dims = resolve_dimensions(family, operands, options)

    if is_noop(family, dims):
        logger.debug("%s: no-op for dimensions %s", family.name, dims)
        return dims, None

    with timer.section('validate'):
        strides, offsets = validate_bounds(family, operands, dims, options)
        if extra_checks is not None:
            extra_checks(dims)
        domain = common_domain(dict(operands))
        routine = select_routine(family, domain)
        modes = resolve_modes(family, options, domain)

    with timer.section('coerce'):
        coerced = {
            rule.name: coerce_scalar(scalars.get(rule.name), rule, domain)
            for rule in family.scalars
        }

    config = ResolvedConfig(
        family=family.name,
        routine=routine,
        **dims,
        **strides,
        **offsets,
        **coerced,
        **modes,
    )
    return dims, PreparedCall(config=config, domain=domain, family=family)


def views(call: PreparedCall, operands: Mapping[str, DenseMatrix]) -> tuple[StridedOperand, ...]:
    """StridedOperand for each operand, in the family's operand order."""
    config = call.config
    return tuple(
        StridedOperand(operands[role].buffer, config.offset(role), config.ld(role))
        for role in call.family.roles
    )


def check_status(status: int, call: PreparedCall) -> None:
    """
    Map a nonzero kernel status to an exception.

    Raises:
        SingularMatrixError: If the family reports singularity through a
            positive status
        KernelError: For any other nonzero status
    """
    if status == 0:
        return
    routine = call.config.routine
    if call.family.singular_status and status > 0:
        raise SingularMatrixError(
            f"{call.family.name}: {routine} reports an exactly singular matrix "
            f"(U[{status}, {status}] is zero)",
            routine=routine, status=status, matrix_name='A'
        )
    raise KernelError(
        f"{call.family.name}: {routine} failed with status {status}",
        routine=routine, status=status
    )


def invoke(
    kernel: Kernel,
    call: PreparedCall,
    operands: Mapping[str, DenseMatrix],
    *extra: Any,
) -> int:
    """
    Call the kernel routine and check its status.

    Returns:
        The kernel status (always 0 when this returns)

    Raises:
        ConfigurationError: If the kernel lacks the routine
        KernelError: If the kernel reports a failure
    """
    routine = call.config.routine
    fn = kernel.get_routine(routine)
    if fn is None:
        raise ConfigurationError(f"kernel {kernel.name!r} does not provide {routine}")
    logger.debug("%s: dispatching %s on %s with %s", call.family.name, routine, kernel.name, call.config)
    status = int(fn(call.config, *views(call, operands), *extra))
    check_status(status, call)
    return status


def noop_result(family: Family, dims: Mapping[str, int], kernel: Kernel, timer: Timer,
                notices: tuple[str, ...] = ()) -> Result[None]:
    """Result of a call that never reached the kernel."""
    timer.stop()
    return Result(
        params=None,
        info={'family': family.name, 'routine': None, 'status': None, 'noop': True,
              'dimensions': dict(dims)},
        timing=timer.result(),
        backend_name=kernel.name,
        warnings=notices,
    )


def call_result(call: PreparedCall, status: int, kernel: Kernel, timer: Timer,
                notices: tuple[str, ...] = ()) -> Result[ResolvedConfig]:
    """Result of a call that ran on the kernel."""
    timer.stop()
    return Result(
        params=call.config,
        info={'family': call.family.name, 'routine': call.config.routine,
              'status': status, 'noop': False, 'domain': call.domain.name},
        timing=timer.result(),
        backend_name=kernel.name,
        warnings=notices,
    )


def execute(
    family: Family,
    operands: Mapping[str, DenseMatrix],
    scalars: Mapping[str, Any],
    overrides: Mapping[str, Any],
    kernel: Kernel,
    notices: tuple[str, ...] = (),
) -> Result[ResolvedConfig | None]:
    """
    Run the whole pipeline for one call.

    The output operand is updated in place by the kernel. Nothing is
    written when any stage before the kernel fails. notices (for example
    why the kernel runs on the CPU) are passed on as Result.warnings.
    """
    timer = Timer()
    timer.start()

    dims, call = prepare(family, operands, scalars, overrides, timer)
    if call is None:
        return noop_result(family, dims, kernel, timer, notices)

    with timer.section('kernel'):
        status = invoke(kernel, call, operands)

    return call_result(call, status, kernel, timer, notices)
