# Copyright (C) Inco - All Rights Reserved.
#
# Unauthorized copying of this file, via any medium, is strictly prohibited. Proprietary and confidential.
#
# [ROUNDING]
#
# Simcore rounds on output, never internally. Factors and balances are carried with the full precision of the current
# decimal context, and only the values returned to the caller are quantized to cents, half-up. Therefore the rounded
# interest of the rows of an accrual table may not add up exactly to the rounded total due minus the principal. The
# balance column, on the other hand, is always consistent with "compute_total_due", because every row is computed from
# the closed-form formula instead of from the previous row.
#
# Quantization widens the precision of the context just enough to keep every integral digit, so huge totals are
# returned in cents instead of failing. The digits beyond the context precision are zeros, not exact arithmetic.
#
# "calculate_interest_factor" is memoized with "functools.cache". The cache key ignores the active decimal context: a
# factor computed under one precision is returned as is under another. The cache is also unbounded. Callers that change
# the context precision should call "calculate_interest_factor.cache_clear()".
#
# [ANNOTATED_TYPES]
#
# Use annotated types instead of explicit checking in code – http://stackoverflow.com/a/72563242. Type errors are
# raised by Typeguard, value errors by this module, as "InvalidArgument".
#
# [CREDIT QUERY]
#
# The credit query capability is a declaration. Simcore never queries pendencies, nor does it relate them to loan
# simulations. Consumers provide their own implementation, typically a test double.
#

'''
Simulation core, Simcore.

Small financial calculation library. Its main purpose is to compute the total amount owed at the end of a loan term,
given the principal, a monthly interest rate and the term in months, using compound interest. It can also break the
accrual down month by month.

The library also converts temperatures from Fahrenheit to Celsius, and declares the contract of a credit query service
that looks up pendencies (delinquency records) by CPF.
'''

# Python.
import enum
import typing as t
import decimal
import logging
import datetime
import functools
import dataclasses
import importlib.metadata

# Libs.
import typeguard
import dateutil.relativedelta

# Simcore version (http://versioningit.readthedocs.io/en/stable/runtime-version.html).
__version__ = importlib.metadata.version('simcore') if 'simcore' in importlib.metadata.packages_distributions() else 'DEV'

# Logger object.
_LOG = logging.getLogger('simcore')

# Zero as decimal.
_0 = decimal.Decimal()

# One as decimal.
_1 = decimal.Decimal(1)

# One hundred as decimal.
_100 = decimal.Decimal(100)

# Centi factor.
_CENTI = decimal.Decimal('0.01')

# Freezing point of water, in Fahrenheit.
_FAHRENHEIT_OFFSET = decimal.Decimal(32)

# Fahrenheit degrees per Celsius degree.
_FAHRENHEIT_RATIO = decimal.Decimal('1.8')

# A month.
_MONTH = dateutil.relativedelta.relativedelta(months=1)

# Errors. {{{
class InvalidArgument(ValueError):
    '''Raised when an argument has the right type, but a value outside of its domain.'''
# }}}

# Helpers. {{{
# Centesimal quantization, half-up. The context precision is widened so that values with more than 26 integral digits
# still fit once quantized.
def _Q(value: decimal.Decimal) -> decimal.Decimal:
    with decimal.localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)

        return value.quantize(_CENTI, rounding=decimal.ROUND_HALF_UP)

def _check_loan(principal: decimal.Decimal, term: int, monthly_rate: decimal.Decimal) -> None:
    if not principal.is_finite() or principal <= _0:
        raise InvalidArgument(f'"principal" must be greater than zero, got {principal}')

    if isinstance(term, bool) or term < 1:
        raise InvalidArgument(f'"term" must be a greater than, or equal to, one, got {term}')

    if not monthly_rate.is_finite() or monthly_rate < _0:
        raise InvalidArgument(f'"monthly_rate" must be greater than, or equal to, zero, got {monthly_rate}')
# }}}

# Public API. Main classes. {{{
@dataclasses.dataclass(frozen=True)
class LoanSimulation:
    '''
    The input of a loan simulation.

      • "principal" is the amount borrowed.

      • "term" is the number of monthly compounding periods.

      • "monthly_rate" is the interest rate applied once per period, as a percentage. Two percent is "Decimal('2.00')".
    '''

    principal: decimal.Decimal

    term: int

    monthly_rate: decimal.Decimal = _0

@dataclasses.dataclass(frozen=True)
class LoanSimulationResult:
    '''
    The output of a loan simulation.

      • "total_due" is the amount owed at the end of the term.

      • "interest" is the part of "total_due" that exceeds the principal.

    Both are rounded to cents.
    '''

    total_due: decimal.Decimal

    interest: decimal.Decimal

@dataclasses.dataclass
class Accrual:
    '''
    An entry of an accrual table.

      • "no" is the period number, starting at one.

      • "date" is the end of the period, when the table has a zero date.

      • "interest" is the interest accrued in the period.

      • "bal" is the amount owed at the end of the period.
    '''

    no: int = 0

    date: t.Optional[datetime.date] = None

    interest: decimal.Decimal = _0

    bal: decimal.Decimal = _0
# }}}

# Public API. Credit query declarations. {{{
class CreditQueryStatus(enum.IntEnum):
    UNDEFINED = -9

    INVALID_PARAMETER = -2

    COMMUNICATION_ERROR = -1

    NO_PENDENCIES = 0

    DELINQUENT = 1

@dataclasses.dataclass(frozen=True)
class Pendency:
    '''
    A delinquency record associated with a national identification number (CPF).

      • "national_id" is the CPF of the debtor.

      • "debtor_name" is the name of the person who owes.

      • "claimant_name" is the name of the creditor who filed the record.

      • "description" tells what the pendency is about.

      • "date" is when the pendency was registered.

      • "amount" is the value owed.
    '''

    national_id: str

    debtor_name: str

    claimant_name: str

    description: str

    date: datetime.date

    amount: decimal.Decimal

@t.runtime_checkable
class CreditQueryService(t.Protocol):
    '''
    A service able to look up pendencies by CPF.

    This is a structural contract. Any object with a matching "lookup_pendencies_by_national_id" method satisfies it,
    without inheriting from this class.
    '''

    def lookup_pendencies_by_national_id(self, national_id: str) -> t.List[Pendency]:
        ...

# The same capability, as a plain function.
PendencyLookup = t.Callable[[str], t.List[Pendency]]
# }}}

# Public API. Interest calculation. {{{
@functools.cache
@typeguard.typechecked
def calculate_interest_factor(rate: decimal.Decimal, term: int, percent: bool = True) -> decimal.Decimal:
    '''
    Calculates the compound interest factor of a rate applied over a number of periods.

    >>> from decimal import Decimal
    >>>
    >>> calculate_interest_factor(Decimal('2'), 2)
    Decimal('1.0404')
    >>> calculate_interest_factor(Decimal('0.5'), 1, percent=False)
    Decimal('1.5')

    A zero rate, or zero periods, yield a neutral factor.

    >>> calculate_interest_factor(Decimal(0), 12)
    Decimal('1')
    >>> calculate_interest_factor(Decimal(3), 0)
    Decimal('1')
    '''

    if percent:
        rate = rate / _100

    if rate and term:
        return (_1 + rate) ** term

    else:
        return _1

@typeguard.typechecked
def compute_total_due(principal: decimal.Decimal, term: int, monthly_rate: decimal.Decimal) -> decimal.Decimal:
    '''
    Computes the amount owed at the end of a loan.

    To understand how to invoke this function, consider the following sentence:

      "Return how much is owed for a loan of amount V, over N months, at a monthly rate of TM percent."

    From it derive the three parameters of this routine.

      • "principal", the amount V. Must be positive.

      • "term", the number of months N. Must be greater than, or equal to, one.

      • "monthly_rate", the percentage TM. Must not be negative. Interest compounds once a month.

    The result is "V * (1 + TM / 100) ^ N", rounded to cents, half-up.

    Money and rates must be "decimal.Decimal" instances. Plain numbers are refused by Typeguard, even integers, i.e.,
    "compute_total_due(10000, 12, 2)" raises "typeguard.TypeCheckError". Write "Decimal(10000)" and "Decimal(2)".

    >>> from decimal import Decimal
    >>>
    >>> compute_total_due(Decimal('10000'), 12, Decimal('2.00'))
    Decimal('12682.42')
    >>> compute_total_due(Decimal('10000'), 2, Decimal('2.00'))
    Decimal('10404.00')

    Without interest, the principal is owed.

    >>> compute_total_due(Decimal('350.5'), 7, Decimal(0))
    Decimal('350.50')
    '''

    _check_loan(principal, term, monthly_rate)

    val = principal * calculate_interest_factor(monthly_rate, term)

    _LOG.debug(f'total due for {principal} over {term} months at {monthly_rate}% per month is {val}')

    return _Q(val)

@typeguard.typechecked
def simulate_loan(simulation: LoanSimulation) -> LoanSimulationResult:
    '''
    Simulates a loan.

    Same as "compute_total_due", but takes a "LoanSimulation" and also reports the interest.

    >>> from decimal import Decimal
    >>>
    >>> simulate_loan(LoanSimulation(principal=Decimal('15000'), term=36, monthly_rate=Decimal('6.00')))
    LoanSimulationResult(total_due=Decimal('122208.78'), interest=Decimal('107208.78'))
    '''

    total_due = compute_total_due(simulation.principal, simulation.term, simulation.monthly_rate)

    return LoanSimulationResult(total_due=total_due, interest=_Q(total_due - simulation.principal))

@typeguard.typechecked
def get_accrual_table(
    principal: decimal.Decimal,
    term: int,
    monthly_rate: decimal.Decimal, *,
    zero_date: t.Optional[datetime.date] = None
) -> t.Generator[Accrual, None, None]:
    '''
    Generates the monthly accrual table of a loan.

    The parameters "principal", "term" and "monthly_rate" are the same as in "compute_total_due". The optional
    "zero_date" is the date the loan starts. When given, each entry is dated a whole number of months after it.

    Yields one "Accrual" per month. The balance of the last one is the total due.

    >>> from decimal import Decimal
    >>>
    >>> [(x.no, x.interest, x.bal) for x in get_accrual_table(Decimal(10000), 2, Decimal(2))]
    [(1, Decimal('200.00'), Decimal('10200.00')), (2, Decimal('204.00'), Decimal('10404.00'))]

    Month ends are clamped.

    >>> from datetime import date
    >>>
    >>> [x.date for x in get_accrual_table(Decimal(100), 3, Decimal(1), zero_date=date(2024, 1, 31))]
    [datetime.date(2024, 2, 29), datetime.date(2024, 3, 31), datetime.date(2024, 4, 30)]
    '''

    _check_loan(principal, term, monthly_rate)

    prev = principal

    for no in range(1, term + 1):
        bal = principal * calculate_interest_factor(monthly_rate, no)
        ent = Accrual(no=no, date=zero_date + _MONTH * no if zero_date else None, interest=_Q(bal - prev), bal=_Q(bal))

        _LOG.debug(f'accrual {no}/{term}: {ent}')

        yield ent

        prev = bal
# }}}

# Public API. Temperature conversion. {{{
@typeguard.typechecked
def convert_fahrenheit_to_celsius(fahrenheit: decimal.Decimal) -> decimal.Decimal:
    '''
    Converts a temperature from Fahrenheit to Celsius, rounded to cents of a degree.

    >>> from decimal import Decimal
    >>>
    >>> convert_fahrenheit_to_celsius(Decimal('90.5'))
    Decimal('32.50')
    >>> convert_fahrenheit_to_celsius(Decimal(212))
    Decimal('100.00')
    >>> convert_fahrenheit_to_celsius(Decimal(-40))
    Decimal('-40.00')
    '''

    if not fahrenheit.is_finite():
        raise InvalidArgument(f'"fahrenheit" must be a finite number, got {fahrenheit}')

    return _Q((fahrenheit - _FAHRENHEIT_OFFSET) / _FAHRENHEIT_RATIO)
# }}}

# Log current version info.
_LOG.info(f'Simcore version {__version__} initialized')

if __name__ == '__main__':
    import doctest

    doctest.testmod()

# vi:fdm=marker:
