"""
Structured run diagnostics for the IP-MS preparation pipeline.

Every stage reports counters and data-quality events here instead of
printing or warning directly. Progress lines are only printed in verbose
mode, in the same step/summary layout as the rest of the pipeline.
"""

import warnings

from .errors import DataQualityWarning


class Diagnostics:
    """
    Collects counters, per-stage row removals and data-quality events.

    Parameters
    ----------
    verbose : bool, optional
        Print progress lines while the pipeline runs (default: False).
    """

    def __init__(self, verbose=False):
        self.verbose = verbose
        self.counts = {
            'count_na': 0,
            'n_ignored': 0,
            'n_dropped': 0,
            'n_imputed': 0,
            'n_unresolved': 0,
        }
        self.removed = {}
        self.events = []

    def header(self, title):
        if self.verbose:
            print("\n" + "="*80)
            print(title)
            print("="*80)

    def step(self, message):
        if self.verbose:
            print(f"\n{message}")

    def note(self, message):
        if self.verbose:
            print(f"  > {message}")

    def record(self, name, value):
        self.counts[name] = value

    def removed_rows(self, stage, n_removed):
        self.removed[stage] = self.removed.get(stage, 0) + int(n_removed)

    def warn(self, stage, message, count=None):
        """Record a data-quality event."""
        self.events.append({'stage': stage, 'message': message, 'count': count})
        if self.verbose:
            print(f"  Warning: {message}")

    def emit_warnings(self):
        """Re-raise every recorded event through the warnings machinery."""
        for event in self.events:
            warnings.warn(f"[{event['stage']}] {event['message']}", DataQualityWarning, stacklevel=3)

    def to_dict(self, roles=None, total_rows_removed=0):
        info = dict(self.counts)
        info['total_rows_removed'] = int(total_rows_removed)
        info['removed'] = dict(self.removed)
        info['events'] = list(self.events)
        info['roles'] = roles
        return info
