#!/usr/bin/env python3
"""
Generate realistic sample readings for one device.
Creates N hours of water-quality and light data with natural-looking curves.
"""
import argparse
import math
import random
from datetime import datetime, timedelta, timezone

from hydromon.database import SessionLocal
from hydromon.models import Device, LightData, WaterData

# Base values with daily amplitude and sensor noise
METRIC_PROFILES = {
    "temperature": {"base": 22.0, "amplitude": 3.0, "noise": 0.3},
    "ph": {"base": 7.2, "amplitude": 0.2, "noise": 0.05},
    "dissolved_oxygen": {"base": 8.0, "amplitude": 1.5, "noise": 0.2},
    "turbidity": {"base": 3.0, "amplitude": 1.0, "noise": 0.4},
    "intensity": {"base": 900.0, "amplitude": 0.0, "noise": 30.0},
}


def generate_value(t_hours: float, metric: str) -> float:
    """Generate a realistic value at time t (hours from start)."""
    profile = METRIC_PROFILES[metric]
    base = profile["base"]
    amplitude = profile["amplitude"]
    noise = profile["noise"]
    hour_of_day = t_hours % 24

    if metric == "intensity":
        # Sun pattern: bell curve around 13:00, near zero at night
        if 6 <= hour_of_day <= 20:
            normalized = (hour_of_day - 13) / 7
            value = base * math.exp(-3 * normalized ** 2) + random.gauss(0, noise)
        else:
            value = random.gauss(0, noise / 5)
        return round(max(0.0, value), 1)

    if metric == "temperature":
        # Warmer in the afternoon, lags the light curve
        value = base + math.sin((hour_of_day - 9) * math.pi / 12) * amplitude
    elif metric == "dissolved_oxygen":
        # Photosynthesis raises DO during the day; warmer water holds less at night
        value = base + math.sin((hour_of_day - 8) * math.pi / 12) * amplitude
    elif metric == "ph":
        value = base + math.sin((hour_of_day - 10) * math.pi / 12) * amplitude
    else:
        # Turbidity: mostly flat with occasional spikes
        value = base + (amplitude * 3 if random.random() < 0.02 else 0.0)

    value += random.gauss(0, noise)
    if metric == "ph":
        return round(max(0.0, min(14.0, value)), 2)
    return round(max(0.0, value), 2)


def main():
    parser = argparse.ArgumentParser(description="Insert synthetic readings for a device")
    parser.add_argument("--device", required=True, help="Device id")
    parser.add_argument("--hours", type=int, default=24, help="How many hours back to generate")
    parser.add_argument("--interval", type=int, default=10, help="Minutes between readings")
    args = parser.parse_args()

    session = SessionLocal()
    try:
        device = session.get(Device, args.device)
        if device is None:
            print(f"Error: device '{args.device}' not found.")
            return 1

        now = datetime.now(timezone.utc)
        start = now - timedelta(hours=args.hours)
        steps = args.hours * 60 // args.interval
        print(f"Generating {steps} points for {device.name} ({device.id})")

        for i in range(steps):
            ts = start + timedelta(minutes=i * args.interval)
            t_hours = ts.hour + ts.minute / 60
            session.add(WaterData(
                device_id=device.id,
                timestamp=ts,
                temperature=generate_value(t_hours, "temperature"),
                ph=generate_value(t_hours, "ph"),
                dissolved_oxygen=generate_value(t_hours, "dissolved_oxygen"),
                turbidity=generate_value(t_hours, "turbidity"),
            ))
            session.add(LightData(
                device_id=device.id,
                timestamp=ts,
                intensity=generate_value(t_hours, "intensity"),
            ))
            if i % 100 == 0:
                session.flush()

        session.commit()
        print(f"Done: {steps} water readings and {steps} light readings")
        return 0
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
