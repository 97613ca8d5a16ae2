"""
Combined progress display for concurrent uploads.

Every progress event from any transfer recomputes one global ratio:

    ratio = sum(amount) / sum(total) - (transfers with unknown total) / 10

The correction keeps the display from reaching 100% while some transfers
have not reported a size yet. A new value is emitted only when it differs
from the last emitted one; the ratio is not guaranteed to be monotonic.
"""

from typing import Iterable, List, Optional, Protocol

from tqdm import tqdm

from asset_uploader.storage.transfer import TransferHandle

UNKNOWN_TOTAL_PENALTY = 0.1


class ProgressReporter(Protocol):
    def update(self, ratio: float) -> None: ...

    def close(self) -> None: ...


class TqdmProgressReporter:
    """Renders the combined ratio as a tqdm bar out of 100."""

    def __init__(self, desc: str = "Uploading") -> None:
        self._bar = tqdm(
            total=100,
            desc=desc,
            bar_format="{desc} [{bar}] {percentage:3.0f}% {remaining}",
            leave=True,
        )

    def update(self, ratio: float) -> None:
        self._bar.n = round(min(max(ratio, 0.0), 1.0) * 100, 1)
        self._bar.refresh()

    def close(self) -> None:
        self._bar.close()


class ProgressAggregator:
    """
    Subscribes to a set of transfers and reports one combined ratio.

    Attributes:
        last_ratio: Most recently emitted ratio (None before the first event)
    """

    def __init__(self, handles: Iterable[TransferHandle], reporter: ProgressReporter) -> None:
        self._handles: List[TransferHandle] = list(handles)
        self._reporter = reporter
        self.last_ratio: Optional[float] = None

        for handle in self._handles:
            handle.add_progress_listener(self._on_progress)

    def compute_ratio(self) -> float:
        totals = [handle.progress_total for handle in self._handles]
        unknown = sum(1 for total in totals if total is None)
        total = sum(total for total in totals if total is not None)
        amount = sum(
            handle.progress_amount
            for handle in self._handles
            if handle.progress_total is not None
        )

        base = amount / total if total else 0.0
        return base - unknown * UNKNOWN_TOTAL_PENALTY

    def _on_progress(self, _handle: TransferHandle) -> None:
        ratio = self.compute_ratio()
        if ratio != self.last_ratio:
            self._reporter.update(ratio)
            self.last_ratio = ratio

    def close(self) -> None:
        self._reporter.close()
