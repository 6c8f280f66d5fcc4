'''
Parse sysbench OLTP run output into per-interval samples and the average TPS summary.
'''

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

HISTOGRAM_MARKER = "Latency histogram (values are in milliseconds)"
DEFAULT_PERCENTILE = 99

# [ 10s ] thds: 4 tps: 120.50 qps: 480.00 (r/w/o: ...) lat (ms,99%): 5.25 err/s: 0.00 reconn/s: 0.00
interval_pattern_ = r"\[\s*(\d+)s\s*\]\s*thds:\s*(\d+)\s*tps:\s*([\d.]+)\s*qps:\s*([\d.]+).*lat\s*\(ms,{pct}%\):\s*([\d.]+)\s*err/s:\s*([\d.]+)"
avg_tps_pattern = re.compile(r"transactions:\s+\d+\s+\(([\d.]+)\s+per sec\.\)")


@dataclass(frozen=True)
class IntervalSample:
    time: int
    tps: float
    qps: float
    lat: float


@dataclass(frozen=True)
class BenchmarkRun:
    samples: Tuple[IntervalSample, ...]
    avg_tps: Optional[float]  # None when the summary could not be extracted
    name: Optional[str] = None
    diagnostics: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_avg_tps(self) -> bool:
        return self.avg_tps is not None


def _check_content(content):
    if not isinstance(content, str):
        raise TypeError(f"benchmark log content must be str, got {type(content).__name__}")


def interval_pattern(percentile=DEFAULT_PERCENTILE):
    return re.compile(interval_pattern_.format(pct=re.escape(str(percentile))))


def extract_results(content: str, percentile=DEFAULT_PERCENTILE) -> List[IntervalSample]:
    _check_content(content)
    pattern = interval_pattern(percentile)
    results = []
    for line in content.splitlines():
        # histogram rows can look like interval lines
        if HISTOGRAM_MARKER in line:
            break
        match = pattern.search(line)
        if not match:
            continue
        time, _thds, tps, qps, lat, _err = match.groups()
        try:
            results.append(IntervalSample(time=int(time), tps=float(tps), qps=float(qps), lat=float(lat)))
        except ValueError:
            # e.g. "1.2.3" slips through [\d.]+
            continue
    return results


def extract_avg_tps(content: str) -> Optional[float]:
    _check_content(content)
    match = avg_tps_pattern.search(content)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        return None


def parse_benchmark_log(content: str, name: Optional[str] = None, percentile=DEFAULT_PERCENTILE) -> BenchmarkRun:
    samples = extract_results(content, percentile=percentile)
    avg_tps = extract_avg_tps(content)
    diagnostics = []
    if avg_tps is None:
        message = f"Unable to extract average TPS from {name or 'the content'}"
        logger.warning(message)
        diagnostics.append(message)
    return BenchmarkRun(samples=tuple(samples), avg_tps=avg_tps, name=name, diagnostics=tuple(diagnostics))
