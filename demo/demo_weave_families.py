#!/usr/bin/env python3
"""
Demo: The Built-in Weave Families

Generates every built-in family at the same size and shows:

1. The hook chain as text (^ Up, v Down, - Neutral)
2. How many hooks are raised on each family
3. A hook chain + fabric preview figure per family

Output: output/demo_weave_families/<family>.png
"""

from pathlib import Path

import matplotlib.pyplot as plt

from loomhook.core import HookState, WeaveFamily, generate
from loomhook.viz import plot_pattern_summary, save_figure


OUTPUT_DIR = Path("output/demo_weave_families")


def main():
    print("=" * 60)
    print("  WEAVE FAMILY DEMONSTRATION")
    print("=" * 60)

    pick_count, hook_count = 10, 12
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print(f"\n1. Generating every family at {pick_count} picks x {hook_count} hooks...")
    matrices = {
        family: generate(family, pick_count, hook_count)
        for family in WeaveFamily
        if family.is_generated
    }

    for step, (family, matrix) in enumerate(matrices.items(), start=2):
        info = family.info
        print(f"\n{step}. {info.display_name} (repeat {info.repeat})")
        for line in matrix.to_text().splitlines():
            print(f"   {line}")

        up = matrix.count(HookState.UP)
        print(f"   Raised: {up}/{pick_count * hook_count} cells ({up / (pick_count * hook_count):.0%})")

        fig = plot_pattern_summary(matrix, current_pick=0)
        path = OUTPUT_DIR / f"{family.value}.png"
        save_figure(fig, path)
        plt.close(fig)
        print(f"   Saved: {path}")

    print("\n" + "=" * 60)
    print("  Weave family demonstration complete!")
    print("=" * 60)
    print("\nReading the output:")
    print("  • Plain alternates on every pick and every hook")
    print("  • Twill shifts its raised hook by one per pick (diagonal)")
    print("  • Basket raises hooks in 2x2 blocks")


if __name__ == "__main__":
    main()
