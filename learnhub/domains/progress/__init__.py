# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Progress roll-up from material completion to enrollment percentage."""

from learnhub.domains.progress.calculator import (
    ProgressCalculator,
    apply_progress,
    calculate_progress_from_counts,
)

__all__ = ["ProgressCalculator", "apply_progress", "calculate_progress_from_counts"]
