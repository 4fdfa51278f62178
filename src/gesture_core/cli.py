"""gesture-core CLI.

Usage:
    gesture-core replay    Run a landmark recording through the detectors
    gesture-core config    Print or write a detector config as YAML
    gesture-core synth     Write a synthetic recording for smoke tests
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import numpy as np
import typer

from gesture_core.config import PRESETS, ConfigError, EngineConfig
from gesture_core.landmarks import INDEX_TIP, MIDDLE_TIP, NUM_LANDMARKS, THUMB_TIP, WRIST
from gesture_core.recorder import LandmarkPlayer, LandmarkRecorder
from gesture_core.session import GestureSession

app = typer.Typer(
    name="gesture-core",
    help="🤏 Pinch, scissors and dwell detection from hand landmarks.",
    add_completion=False,
)


@app.callback()
def main_options(
    log_level: str = typer.Option("warning", help="Log level"),
):
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config(path: Optional[str]) -> EngineConfig:
    if not path:
        return EngineConfig()
    try:
        return EngineConfig.from_yaml(path)
    except ConfigError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(1)


@app.command()
def replay(
    recording: str = typer.Argument(..., help="Path to a .json landmark recording"),
    config: Optional[str] = typer.Option(None, help="Path to detector config YAML"),
):
    """Replay a recorded session and report detected gestures."""
    path = Path(recording)
    if not path.exists():
        typer.echo(f"❌ Recording not found: {recording}", err=True)
        raise typer.Exit(1)

    try:
        player = LandmarkPlayer.load(path)
    except (OSError, ValueError) as e:
        typer.echo(f"❌ Cannot read recording {path.name}: {e}", err=True)
        raise typer.Exit(1)

    session = GestureSession(_load_config(config))
    typer.echo(f"▶️  Replaying {path.name} ({player.frame_count} frames, {player.duration:.1f}s)")

    def on_dwell(x, y):
        typer.echo(f"   ⏱  dwell at ({x:.3f}, {y:.3f})")

    session.on_dwell(on_dwell)

    drawing = None
    for frame in player.play():
        result = session.process(
            frame.landmarks, frame.frame_size, timestamp=frame.timestamp * 1000.0
        )
        if result.drawing_gesture != drawing:
            if result.drawing_gesture:
                x, y = result.drawing_point
                typer.echo(f"   ✏️  {result.drawing_gesture} start at ({x}, {y}) [t={frame.timestamp:.2f}s]")
            else:
                typer.echo(f"   ✋ {drawing} end [t={frame.timestamp:.2f}s]")
            drawing = result.drawing_gesture

    stats = session.stats
    typer.echo(f"\n✅ Replay complete.")
    typer.echo(f"   Frames:          {stats.frames}")
    typer.echo(f"   Pinch frames:    {stats.pinch_frames}")
    typer.echo(f"   Scissors frames: {stats.scissors_frames}")
    typer.echo(f"   Dwell triggers:  {stats.dwell_triggers}")


@app.command("config")
def show_config(
    preset: str = typer.Option("default", help=f"One of: {', '.join(PRESETS)}"),
    output: Optional[str] = typer.Option(None, "-o", help="Write YAML here instead of stdout"),
):
    """Print a detector config preset as YAML."""
    factory = PRESETS.get(preset)
    if factory is None:
        typer.echo(f"❌ Unknown preset '{preset}'. Choose from: {', '.join(PRESETS)}", err=True)
        raise typer.Exit(1)

    cfg = factory()
    if output:
        cfg.to_yaml(output)
        typer.echo(f"💾 Config written to {output}")
    else:
        typer.echo(cfg.dump_yaml(), nl=False)


def synthetic_hand(cx: float, cy: float, pinch: bool = False) -> np.ndarray:
    """An open hand around (cx, cy), optionally with thumb and index touching."""
    lm = np.zeros((NUM_LANDMARKS, 3), dtype=np.float64)
    lm[WRIST] = [cx, cy + 0.3, 0.0]
    tips = {
        THUMB_TIP: [cx - 0.1, cy + 0.1],
        INDEX_TIP: [cx, cy - 0.05],
        MIDDLE_TIP: [cx + 0.06, cy - 0.07],
        16: [cx + 0.11, cy - 0.05],
        20: [cx + 0.15, cy],
    }
    if pinch:
        tips[THUMB_TIP] = [cx + 0.005, cy - 0.05]

    # Joints along each finger between the wrist and its tip
    for tip, (tx, ty) in tips.items():
        for step, idx in enumerate(range(tip - 3, tip + 1), start=1):
            frac = step / 4
            lm[idx, 0] = lm[WRIST, 0] + (tx - lm[WRIST, 0]) * frac
            lm[idx, 1] = lm[WRIST, 1] + (ty - lm[WRIST, 1]) * frac
    return lm


@app.command()
def synth(
    output: str = typer.Argument("synthetic.json", help="Output recording path"),
    fps: int = typer.Option(30, help="Frames per second"),
    width: int = typer.Option(1280, help="Frame width in pixels"),
    height: int = typer.Option(720, help="Frame height in pixels"),
):
    """Write a recording with a held point (dwell), a gap, then a pinch."""
    recorder = LandmarkRecorder()
    recorder.start()

    dt = 1.0 / fps
    t = 0.0
    for _ in range(fps):  # 1s still hand
        recorder.add_frame(synthetic_hand(0.5, 0.5), (width, height), timestamp=t)
        t += dt
    for _ in range(fps // 6):  # tracking gap
        recorder.add_frame(None, (width, height), timestamp=t)
        t += dt
    for i in range(fps // 2):  # pinch drifting right
        recorder.add_frame(synthetic_hand(0.3 + i * 0.01, 0.5, pinch=True), (width, height), timestamp=t)
        t += dt

    count = recorder.stop()
    recorder.save(output)
    typer.echo(f"💾 Wrote {count} frames to {output}")


def main():
    app()


if __name__ == "__main__":
    main()
