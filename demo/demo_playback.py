#!/usr/bin/env python3
"""
Demo: Playing a Pattern on the Loom

Builds a session and walks the playback cursor through the picks:

1. Twill pattern, playback driven by a virtual clock
2. Switch to custom mode and hand-edit a few cells
3. Playback driven by the asyncio timer
4. Export the pattern as an exchange document

Output: output/demo_playback/loom-pattern-custom-<ms>.json
"""

import asyncio
from pathlib import Path

from loomhook.core import HookState, PlaybackConfig, WeaveFamily
from loomhook.exchange import PatternBundle, load_bundle, save_bundle
from loomhook.session import LoomSession, SessionConfig


OUTPUT_DIR = Path("output/demo_playback")


def _row_text(row: list[HookState]) -> str:
    return " ".join(state.symbol for state in row)


async def _timer_playback(session: LoomSession, seconds: float):
    seen = []
    session.playback.on_tick = seen.append
    session.playback.play()
    await asyncio.sleep(seconds)
    await session.close()
    return seen


def main():
    print("=" * 60)
    print("  PLAYBACK DEMONSTRATION")
    print("=" * 60)

    print("\n1. Twill, 6 picks x 8 hooks, virtual clock (500 ms per pick)...")
    session = LoomSession(SessionConfig(family=WeaveFamily.TWILL, pick_count=6, hook_count=8))
    session.playback.play()
    for _ in range(8):
        print(f"   pick {session.current_pick + 1}: {_row_text(session.current_row())}")
        session.playback.advance(500)
    print(f"   Ticks so far: {session.playback.total_ticks} (wraps after pick 6)")

    print("\n2. Custom mode, hand-edited...")
    session.select_family(WeaveFamily.CUSTOM)
    for pick in range(session.matrix.pick_count):
        session.set_cell(pick, pick, HookState.UP)
        session.set_cell(pick, session.matrix.hook_count - 1 - pick, HookState.DOWN)
    print(f"   Playing after replacement: {session.playback.is_playing}")
    for line in session.matrix.to_text().splitlines():
        print(f"   {line}")

    print("\n3. Asyncio timer at 50 ms per pick for 0.4 s...")
    session.playback.config = PlaybackConfig(tick_interval_ms=50.0)
    seen = asyncio.run(_timer_playback(session, 0.4))
    print(f"   Picks visited: {[pick + 1 for pick in seen]}")
    print(f"   Timer still active: {session.playback.timer_active}")

    print("\n4. Exporting...")
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    path = save_bundle(PatternBundle(session.matrix, session.analysis), OUTPUT_DIR)
    restored = load_bundle(path)
    print(f"   Saved: {path}")
    print(f"   Reloaded identical: {restored.matrix == session.matrix}")

    print("\n" + "=" * 60)
    print("  Playback demonstration complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
