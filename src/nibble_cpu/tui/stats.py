"""TUI instruction statistics panel: execution counts grouped by category."""

from __future__ import annotations


# Category definitions: (label, mnemonic set)
_CATEGORIES: list[tuple[str, set[str]]] = [
    ("Control", {"HALT", "RET", "JUMP", "CALL"}),
    ("Shift", {"SHL", "SHR", "ROL", "ROR"}),
    ("Logic", {"NOT", "NAND", "AND", "OR", "XOR"}),
    ("Memory", {"LOAD", "STOR"}),
    ("Branch", {"BREQ", "BRNE", "CREQ", "CRNE"}),
]

_CATEGORY_ORDER: list[str] = [label for label, _ in _CATEGORIES] + ["Other"]


def _categorize(mnemonic: str) -> str:
    """Return the category label for a given mnemonic, or "Other"."""
    for label, mnemonics in _CATEGORIES:
        if mnemonic in mnemonics:
            return label
    return "Other"


def format_instruction_stats(stats: dict[str, int]) -> str:
    """Format instruction execution counts for display in a Rich panel.

    One line per category that has executed at least once, giving the
    category total, its share of all instructions, and the count of
    each of its mnemonics (most frequent first):

        Memory  6  67%  STOR 4  LOAD 2

    Args:
        stats: Dict mapping instruction mnemonic to execution count.

    Returns:
        A multi-line string suitable for display.
    """
    if not stats:
        return "No instructions executed."

    total = sum(stats.values())
    groups: dict[str, list[tuple[str, int]]] = {}
    for name, count in stats.items():
        groups.setdefault(_categorize(name), []).append((name, count))

    count_width = len(f"{total:,}")
    lines = [f"Executed: {total:,}"]
    for label in _CATEGORY_ORDER:
        members = groups.get(label)
        if not members:
            continue
        members.sort(key=lambda item: (-item[1], item[0]))
        cat_total = sum(count for _, count in members)
        pct = cat_total / total * 100
        detail = "  ".join(f"{name} {count:,}" for name, count in members)
        lines.append(
            f"{label:<8}{cat_total:>{count_width},} {pct:3.0f}%  {detail}"
        )

    return "\n".join(lines)
