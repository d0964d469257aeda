from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    points_per_block: int = 1
    line_clear_points: int = 10
    line_clear_multiplier: int = 2

    def placement_score(self, cells: int) -> int:
        return cells * self.points_per_block

    def score_for_lines(self, lines: int) -> int:
        """Bonus for clearing ``lines`` rows/columns at once: 0, 10, 24, 42, 64, ..."""
        if lines <= 0:
            return 0
        return lines * self.line_clear_points + self.line_clear_multiplier * lines * (lines - 1)
