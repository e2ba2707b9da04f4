"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 4 drivers with registered vehicles
  - 6 passengers without vehicles
  - 6 scheduled trips over the next week (some already partly booked)

Trips go through ``TripService`` and bookings through ``BookingEngine`` so
the sample data obeys the same rules as API traffic.
"""

import asyncio
from datetime import timedelta

from sqlalchemy import text

from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.models import UserModel
from src.infrastructure.repositories import TripRepository, UserRepository
from src.services.booking import BookingEngine
from src.services.trips import TripService, local_now


DRIVERS = [
    {
        "id": "driver-laura",
        "name": "Laura Gómez",
        "email": "laura@example.com",
        "vehicle": {"plate": "ABC123", "color": "Gris", "brand": "Mazda", "model": "3", "capacity": 4},
    },
    {
        "id": "driver-andres",
        "name": "Andrés Rojas",
        "email": "andres@example.com",
        "vehicle": {"plate": "XYZ789", "color": "Blanco", "brand": "Renault", "model": "Sandero", "capacity": 3},
    },
    {
        "id": "driver-camila",
        "name": "Camila Torres",
        "email": "camila@example.com",
        "vehicle": {"plate": "JKL456", "color": "Rojo", "brand": "Chevrolet", "model": "Onix", "capacity": 4},
    },
    {
        "id": "driver-felipe",
        "name": "Felipe Castro",
        "email": "felipe@example.com",
        "vehicle": {"plate": "MNO321", "color": "Azul", "brand": "Kia", "model": "Picanto", "capacity": 2},
    },
]

PASSENGERS = [
    {"id": "passenger-sofia", "name": "Sofía Díaz", "email": "sofia@example.com"},
    {"id": "passenger-mateo", "name": "Mateo López", "email": "mateo@example.com"},
    {"id": "passenger-valentina", "name": "Valentina Ruiz", "email": "valentina@example.com"},
    {"id": "passenger-santiago", "name": "Santiago Pérez", "email": "santiago@example.com"},
    {"id": "passenger-isabella", "name": "Isabella Moreno", "email": "isabella@example.com"},
    {"id": "passenger-nicolas", "name": "Nicolás Vargas", "email": "nicolas@example.com"},
]

# (driver, days ahead, departure, arrival, origin, destination, cost, methods, route, passengers)
TRIPS = [
    ("driver-laura", 1, "06:30", "07:30", "Cedritos", "Universidad Nacional", 6000, ["nequi", "efectivo"], "autopista", ["passenger-sofia", "passenger-mateo"]),
    ("driver-laura", 2, "17:30", "18:45", "Universidad Nacional", "Cedritos", 6000, ["nequi"], "autopista", []),
    ("driver-andres", 1, "07:00", "08:10", "Chía", "Calle 100", 9000, ["daviplata", "efectivo"], "chia", ["passenger-valentina"]),
    ("driver-camila", 3, "06:00", "07:20", "Suba Rincón", "Chapinero", 5000, ["efectivo"], "suba", ["passenger-santiago", "passenger-isabella", "passenger-nicolas"]),
    ("driver-felipe", 2, "05:45", "06:50", "Mosquera", "Calle 26", 7000, ["nequi", "daviplata"], "mosquera", ["passenger-sofia", "passenger-mateo"]),
    ("driver-felipe", 4, "18:00", "19:30", "Héroes", "Zipaquirá", 12000, ["efectivo"], "zipa", []),
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        for u in DRIVERS + PASSENGERS:
            session.add(UserModel(**u))
        await session.flush()
        print(f"  Created {len(DRIVERS)} drivers and {len(PASSENGERS)} passengers")

        # ── Trips + bookings ──────────────────────────────────────────
        trip_repo = TripRepository(session)
        service = TripService(trip_repo, UserRepository(session))
        booking = BookingEngine(trip_repo)
        today = local_now().date()

        booked = 0
        for (driver_id, days, dep, arr, origin, dest, cost, methods, route, riders) in TRIPS:
            trip = await service.create_trip(
                driver_id,
                {
                    "trip_date": (today + timedelta(days=days)).isoformat(),
                    "departure_time": dep,
                    "arrival_time": arr,
                    "origin": origin,
                    "destination": dest,
                    "cost": cost,
                    "payment_methods": methods,
                    "route_tag": route,
                },
            )
            for rider in riders:
                await booking.book(trip.id, rider)
                booked += 1
        print(f"  Created {len(TRIPS)} trips with {booked} bookings")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
