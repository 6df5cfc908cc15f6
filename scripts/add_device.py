import argparse

from hydromon.database import SessionLocal
from hydromon.models import Device, DeviceStatus
from hydromon.services.credentials import find_user_by_email


def main():
    parser = argparse.ArgumentParser(description="Register a monitoring device for an existing user")
    parser.add_argument("--owner", required=True, help="Owner email address")
    parser.add_argument("--name", required=True, help="Device name")
    parser.add_argument("--type", required=True, help="Device type (water_sensor, light_sensor, pump, ...)")
    parser.add_argument("--location", help="Where the device is installed (optional)")
    parser.add_argument(
        "--status",
        choices=[s.value for s in DeviceStatus if s != DeviceStatus.ERROR],
        default=DeviceStatus.INACTIVE.value,
        help="Initial status",
    )

    args = parser.parse_args()

    session = SessionLocal()
    try:
        owner = find_user_by_email(session, args.owner)
        if owner is None:
            print(f"Error: no user registered with email '{args.owner}'.")
            return 1

        device = Device(
            owner_id=owner.id,
            name=args.name,
            type=args.type,
            location=args.location,
            status=DeviceStatus(args.status),
        )
        session.add(device)
        session.commit()

        print("\nDevice created")
        print("--------------------------------")
        print(f"ID:       {device.id}")
        print(f"Name:     {device.name}")
        print(f"Type:     {device.type}")
        print(f"Status:   {device.status.value}")
        print(f"Owner:    {owner.email}")
        print("--------------------------------")
        return 0
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    raise SystemExit(main())
