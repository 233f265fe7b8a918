import pytest

from simulation import BuildingConfig, ElevatorSystem, Passenger


@pytest.fixture
def make_system():
    def _make(floors_count, max_loads, passengers=()):
        config = BuildingConfig(floors_count=floors_count, max_loads=list(max_loads))
        return ElevatorSystem.from_config(config, list(passengers))

    return _make


def rider(passenger_id, appear_tick, origin, destination, weight=70.0):
    return Passenger(
        passenger_id=passenger_id,
        appear_tick=appear_tick,
        origin=origin,
        destination=destination,
        weight=weight,
    )
