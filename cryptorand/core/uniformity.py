"""
cryptorand Uniformity - Statistical checks on the generated output.

Bit-level tests follow NIST SP 800-22; value-level tests are chi-square
goodness-of-fit against the uniform distribution.
"""

from typing import Any, Dict, Iterable, Optional, Sequence

import numpy as np
from scipy import special, stats

from cryptorand.core.entropy import EntropySource, resolve
from cryptorand.core.generator import string_with_charset
from cryptorand.core.log import get_logger
from cryptorand.core.sampler import number_in_range, numbers
from cryptorand.core.sequence import pick, shuffle

logger = get_logger('uniformity')

DEFAULT_ALPHA = 0.01


def numbers_to_bits(values: np.ndarray) -> np.ndarray:
    """Unpack an int64 array into its bits, most significant first."""
    return np.unpackbits(values.astype('>i8').view(np.uint8))


def frequency_monobit_test(bits: np.ndarray, alpha: float = DEFAULT_ALPHA) -> Dict[str, Any]:
    """NIST Test 1: Frequency (Monobit) Test"""
    n = len(bits)
    ones_count = np.sum(bits, dtype=np.int64)
    s = 2 * ones_count - n
    s_obs = abs(s) / np.sqrt(n)
    p_value = float(special.erfc(s_obs / np.sqrt(2)))

    return {
        'name': 'Frequency (Monobit)',
        'p_value': p_value,
        'passed': p_value >= alpha,
        'statistic': float(s_obs)
    }


def runs_test(bits: np.ndarray, alpha: float = DEFAULT_ALPHA) -> Dict[str, Any]:
    """NIST Test 3: Runs Test"""
    n = len(bits)
    proportion = np.mean(bits)

    if abs(proportion - 0.5) >= 2 / np.sqrt(n):
        return {
            'name': 'Runs',
            'p_value': 0.0,
            'passed': False,
            'statistic': None,
            'note': 'Pre-test failed: proportion too far from 0.5'
        }

    runs = 1 + np.sum(bits[:-1] != bits[1:])
    v_obs = abs(runs - 2 * n * proportion * (1 - proportion)) / (
        2 * np.sqrt(2 * n) * proportion * (1 - proportion)
    )
    p_value = float(special.erfc(v_obs))

    return {
        'name': 'Runs',
        'p_value': p_value,
        'passed': p_value >= alpha,
        'statistic': float(v_obs),
        'runs': int(runs)
    }


def chi_square_uniformity(
    counts: Iterable[int],
    name: str = 'Chi-square',
    alpha: float = DEFAULT_ALPHA
) -> Dict[str, Any]:
    """
    Goodness-of-fit of bucket counts against equal expected frequencies.

    Args:
        counts: Observations per bucket (at least two buckets)
        name: Label for the result
        alpha: Significance level

    Returns:
        Result dictionary with p_value and passed
    """
    observed = np.asarray(list(counts), dtype=float)
    if observed.size < 2:
        raise ValueError("Need at least two buckets")

    statistic, p_value = stats.chisquare(observed)

    return {
        'name': name,
        'p_value': float(p_value),
        'passed': float(p_value) >= alpha,
        'statistic': float(statistic),
        'buckets': int(observed.size)
    }


def position_counts(permutations: Iterable[Sequence[int]], size: int) -> np.ndarray:
    """
    Count how often each element lands in each position.

    Args:
        permutations: Shuffled arrangements of range(size)
        size: Number of elements

    Returns:
        (size, size) matrix, row = element, column = position
    """
    matrix = np.zeros((size, size), dtype=np.int64)
    positions = np.arange(size)
    for perm in permutations:
        matrix[np.asarray(perm), positions] += 1
    return matrix


def position_uniformity(matrix: np.ndarray, alpha: float = DEFAULT_ALPHA) -> Dict[str, Any]:
    """
    Chi-square test that every element is equally likely in every position.

    Each trial contributes a whole permutation matrix, not n independent
    draws: the Pearson statistic is asymptotically n/(n-1) times a
    chi-square with (n-1)**2 degrees of freedom, so it is rescaled before
    the lookup.
    """
    n = matrix.shape[0]
    if n < 2:
        raise ValueError("Need at least two elements")

    trials = matrix[:, 0].sum()
    expected = trials / n
    statistic = float(np.sum((matrix - expected) ** 2) / expected) * (n - 1) / n
    dof = (n - 1) ** 2
    p_value = float(stats.chi2.sf(statistic, dof))

    return {
        'name': 'Shuffle positions',
        'p_value': p_value,
        'passed': p_value >= alpha,
        'statistic': statistic,
        'dof': dof
    }


def run_all_checks(
    samples: int = 10000,
    source: Optional[EntropySource] = None,
    alpha: float = DEFAULT_ALPHA,
    verbose: bool = True
) -> Dict[str, Any]:
    """
    Exercise every primitive and test its output distribution.

    Args:
        samples: Draws per check
        source: Entropy provider (default: system CSPRNG)
        alpha: Significance level for each test
        verbose: Log each result

    Returns:
        Dictionary with test results
    """
    if samples < 100:
        raise ValueError(f"Need at least 100 samples, got {samples}")

    source = resolve(source)

    bits = numbers_to_bits(numbers(samples, source=source))

    range_draws = [number_in_range(0, 9, source=source) for _ in range(samples)]

    hexchars = "0123456789abcdef"
    text = string_with_charset(samples, hexchars, source=source)

    items = list(range(7))
    picks = [pick(items, source=source) for _ in range(samples)]

    deck_size = 8
    shuffles = []
    for _ in range(samples // deck_size):
        deck = list(range(deck_size))
        shuffle(deck, source=source)
        shuffles.append(deck)

    tests = [
        frequency_monobit_test(bits, alpha),
        runs_test(bits, alpha),
        chi_square_uniformity(np.bincount(range_draws, minlength=10), 'Range [0, 9]', alpha),
        chi_square_uniformity([text.count(c) for c in hexchars], 'String (hex)', alpha),
        chi_square_uniformity(np.bincount(picks, minlength=len(items)), 'Pick', alpha),
    ]
    if shuffles:
        tests.append(position_uniformity(position_counts(shuffles, deck_size), alpha))

    passed = sum(1 for t in tests if t['passed'])

    if verbose:
        logger.info("UNIFORMITY CHECKS - %s samples from %s", f"{samples:,}", source.name)
        for test in tests:
            status = "PASS" if test['passed'] else "FAIL"
            logger.info("%s  %-20s p-value: %.6f", status, test['name'], test['p_value'])
        logger.info("Result: %d/%d tests passed", passed, len(tests))

    return {
        'tests': tests,
        'passed': passed,
        'total': len(tests),
        'pass_rate': passed / len(tests) if tests else 0
    }
