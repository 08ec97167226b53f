#!/usr/bin/env python3
"""Observe a model in an interactive-style session without grading it.

Drives a SimulationSession with the same messages a live client sends and
records every tick. Useful for seeing what the vehicle actually does.

Usage:
    # Bicycle model through a step steer
    python scripts/observe.py --model bicycle --scenario step-steer --duration 6

    # Unicycle on a circle, noise on, save telemetry
    python scripts/observe.py --model unicycle --scenario const-radius --param process_noise=true --output ticks.csv
"""

import argparse
import csv
import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from vehiclelab.analysis.logger import setup_logging
from vehiclelab.config import apply_overrides
from vehiclelab.models import create_default_registry
from vehiclelab.sim import SimulationSession, list_scenario_presets


def flatten_tick(tick: dict) -> dict:
    """One CSV row per tick: telemetry fields plus notes."""
    telemetry = tick["telemetry"]
    row = {k: v for k, v in telemetry.items() if k != "notes"}
    for key, value in telemetry.get("notes", {}).items():
        row[f"notes.{key}"] = value
    return row


def run_session(
    session: SimulationSession,
    start: dict,
    duration: float,
    frame: float,
    verbose: bool = False,
) -> list:
    """Start the session and advance it frame by frame for ``duration`` wall seconds.

    Returns:
        Tick messages in order
    """
    ticks = []
    for message in session.handle(start):
        if message["type"] == "error":
            raise SystemExit(f"Session error: {message['message']}")
        if message["type"] == "tick":
            ticks.append(message)

    frames = int(round(duration / frame))
    for i in range(frames):
        for message in session.advance(frame):
            if message["type"] == "error":
                print(f"  Error at frame {i}: {message['message']}")
                return ticks
            if message["type"] == "tick":
                ticks.append(message)
                if verbose and i % 10 == 0:
                    tel = message["telemetry"]
                    print(f"  t={tel['t']:6.2f} s: r={tel['r']:+.4f} rad/s, "
                          f"ay={tel['ay']:+.3f} m/s², beta={np.degrees(tel['beta']):+.2f} deg")
    return ticks


def main():
    scenario_ids = [p.id for p in list_scenario_presets()]

    parser = argparse.ArgumentParser(description="Observe model behavior")
    parser.add_argument("--model", type=str, default="bicycle", help="Model id")
    parser.add_argument("--scenario", type=str, choices=scenario_ids, default="step-steer")
    parser.add_argument("--param", action="append", default=[], help="Model parameter key=value")
    parser.add_argument("--scenario-param", action="append", default=[], help="Scenario override key=value")
    parser.add_argument("--dt", type=float, default=None, help="Fixed step (guarded per model)")
    parser.add_argument("--duration", type=float, default=10.0, help="Wall seconds to simulate")
    parser.add_argument("--frame", type=float, default=1.0 / 30.0, help="Wall seconds per advance")
    parser.add_argument("--speed", type=float, default=1.0, help="Speed multiplier")
    parser.add_argument("--output", type=Path, default=None, help="Save ticks to CSV")
    parser.add_argument("--verbose", action="store_true", help="Print periodic telemetry")
    parser.add_argument("--seed", type=int, default=42)

    args = parser.parse_args()

    setup_logging("WARNING")

    start = {
        "type": "start",
        "modelId": args.model,
        "scenarioId": args.scenario,
        "params": apply_overrides({}, args.param),
        "scenarioOverrides": apply_overrides({}, args.scenario_param),
        "seed": args.seed,
        "speedMultiplier": args.speed,
    }
    if args.dt is not None:
        start["dt"] = args.dt

    session = SimulationSession(create_default_registry())

    print(f"Observing {args.model} on {args.scenario} for {args.duration:.1f} s")
    print("-" * 40)
    ticks = run_session(session, start, args.duration, args.frame, verbose=args.verbose)

    if not ticks:
        print("No ticks recorded")
        sys.exit(1)

    # Print summary
    yaw = np.array([t["telemetry"]["r"] for t in ticks])
    ay = np.array([t["telemetry"]["ay"] for t in ticks])
    beta = np.array([t["telemetry"]["beta"] for t in ticks])
    print("\n" + "=" * 40)
    print("SESSION SUMMARY")
    print("=" * 40)
    print(f"Ticks:     {len(ticks)} (sim time {ticks[-1]['t']:.2f} s, dt={session.dt})")
    print(f"Yaw rate:  mean={np.mean(yaw):+.4f}, max={np.max(np.abs(yaw)):.4f} rad/s")
    print(f"Lat accel: mean={np.mean(ay):+.3f}, max={np.max(np.abs(ay)):.3f} m/s²")
    print(f"Sideslip:  max={np.degrees(np.max(np.abs(beta))):.2f} deg")
    if session.dt_clamped:
        print("Note: requested dt was clamped to the model's stable range")

    # Save if requested
    if args.output:
        rows = [flatten_tick(t) for t in ticks]
        with open(args.output, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            writer.writeheader()
            writer.writerows(rows)
        print(f"Telemetry saved to {args.output}")


if __name__ == "__main__":
    main()
