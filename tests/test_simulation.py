"""
Scenario tests for the ElevatorSystem dispatcher.

Expected ticks follow the motion model: 3 ticks per floor plus
floor(5 * load / max_load).
"""

import random

import pytest

from conftest import rider
from simulation import (
    BuildingConfig,
    ContractViolation,
    Elevator,
    ElevatorState,
    ElevatorSystem,
    ScheduleError,
)
from simulation.reports import format_elevator_report, format_passenger_report


def random_schedule(seed, count=60, floors_count=10):
    rng = random.Random(seed)
    passengers = []
    for passenger_id in range(1, count + 1):
        origin = rng.randint(1, floors_count)
        destination = rng.choice([f for f in range(1, floors_count + 1) if f != origin])
        passengers.append(
            rider(passenger_id, rng.randint(0, 120), origin, destination, float(rng.randint(40, 120)))
        )
    return passengers


class TestSinglePassenger:
    def test_boards_immediately_and_arrives_after_travel_time(self, make_system):
        passenger = rider(1, 0, 1, 4, 70.0)
        system = make_system(5, [1000.0], [passenger])

        total = system.run()

        assert passenger.board_tick == 0
        assert passenger.alight_tick == 9
        assert total == 10
        stats = system.elevators[0].stats
        assert stats.floors_passed == 3
        assert stats.idle_ticks == 1
        assert stats.moving_ticks == 9
        assert stats.total_cargo == pytest.approx(70.0)
        assert stats.peak_load == pytest.approx(70.0)
        assert system.elevators[0].state == ElevatorState.IDLE_CLOSED

    def test_late_passenger_waits_for_release(self, make_system):
        passenger = rider(1, 5, 3, 1, 70.0)
        system = make_system(5, [1000.0], [passenger])

        system.run()

        # Car leaves floor 1 at tick 5, reaches floor 3 at 11, floor 1 at 17.
        assert passenger.board_tick == 11
        assert passenger.alight_tick == 17
        assert system.current_time == 18

    def test_finished_event_reports_delivery(self, make_system):
        system = make_system(5, [1000.0], [rider(1, 0, 1, 4, 70.0)])
        events = []
        system.on_event("finished", events.append)

        system.run()

        assert events == [{"time": 10, "delivered": 1}]
        assert system.passengers[1].ride_time == 9

    def test_empty_schedule_finishes_at_once(self, make_system):
        system = make_system(5, [1000.0])
        assert system.run() == 0
        assert system.finished


class TestInterruption:
    def test_moving_car_is_redirected_to_call_on_its_way(self, make_system):
        first = rider(1, 0, 1, 10, 100.0)
        second = rider(2, 9, 5, 7, 100.0)
        system = make_system(10, [1000.0], [first, second])

        system.run()

        # At tick 9 the car is estimated at floor 4 and retargeted to floor 5.
        assert second.board_tick == 12
        assert second.alight_tick == 20
        assert first.alight_tick == 29
        assert first.met_passengers == {2}
        assert second.met_passengers == {1}
        stats = system.elevators[0].stats
        assert stats.floors_passed == 9
        assert stats.peak_load == pytest.approx(200.0)
        assert system.current_time == 30

    def test_call_beyond_target_waits_for_natural_motion(self, make_system):
        first = rider(1, 0, 1, 4, 70.0)
        second = rider(2, 3, 6, 1, 70.0)
        system = make_system(8, [1000.0], [first, second])

        system.run()

        # Reaches 4 at tick 9, then continues up to 6 at tick 15.
        assert first.alight_tick == 9
        assert second.board_tick == 15
        assert second.alight_tick == 30
        assert first.met_passengers == set()


class TestOverload:
    def test_rejected_passenger_is_picked_up_later(self, make_system):
        heavy = rider(1, 0, 1, 3, 80.0)
        light = rider(2, 0, 1, 2, 50.0)
        system = make_system(3, [100.0], [heavy, light])

        system.run()

        assert heavy.board_tick == 0
        assert heavy.alight_tick == 14
        assert light.overloaded_once
        assert not heavy.overloaded_once
        assert light.board_tick == 21
        assert light.alight_tick == 26
        stats = system.elevators[0].stats
        assert stats.overload_count == 1
        assert stats.total_cargo == pytest.approx(130.0)
        assert stats.peak_load == pytest.approx(80.0)
        assert stats.floors_passed == 5
        assert stats.idle_ticks == 2
        assert system.current_time == 27

    def test_capacity_skip_does_not_block_queue(self, make_system):
        first = rider(1, 0, 1, 3, 60.0)
        blocked = rider(2, 0, 1, 3, 60.0)
        small = rider(3, 0, 1, 3, 30.0)
        system = make_system(3, [100.0], [first, blocked, small])

        system.run()

        assert first.board_tick == 0
        assert small.board_tick == 0
        assert blocked.overloaded_once
        assert blocked.board_tick > 0
        assert first.met_passengers == {3}


class TestInvariants:
    def test_loads_and_ticks_hold_on_random_schedule(self, make_system):
        passengers = random_schedule(seed=7)
        system = make_system(10, [400.0, 600.0, 1000.0], passengers)
        seen = []

        def check(payload):
            for elevator in system.elevators:
                onboard = sum(system.passengers[pid].weight for pid in elevator.onboard)
                assert elevator.current_load == pytest.approx(onboard)
                assert elevator.current_load <= elevator.max_load + 1e-9
            seen.append(payload["time"])

        system.on_event("tick", check)
        system.run()

        assert seen == list(range(system.current_time))
        assert all(p.delivered for p in passengers)
        for passenger in passengers:
            assert passenger.appear_tick <= passenger.board_tick <= passenger.alight_tick
            assert passenger.passenger_id not in passenger.met_passengers
            for other in passenger.met_passengers:
                assert passenger.passenger_id in system.passengers[other].met_passengers
        assert all(not floor.has_waiting() for floor in system.building.floors)
        assert all(not elevator.onboard for elevator in system.elevators)
        assert not system.called_floors
        for elevator in system.elevators:
            stats = elevator.stats
            assert stats.idle_ticks + stats.moving_ticks == system.current_time

    def test_reports_are_reproducible(self, make_system):
        outputs = []
        for _ in range(2):
            system = make_system(10, [400.0, 600.0, 1000.0], random_schedule(seed=11))
            system.run()
            outputs.append(
                (
                    format_passenger_report(system.passengers.values()),
                    format_elevator_report(system.elevators, system.current_time),
                )
            )
        assert outputs[0] == outputs[1]


class TestNextTarget:
    def test_scan_from_moving_up_car(self, make_system):
        system = make_system(10, [1000.0])
        elevator = system.elevators[0]
        elevator.current_floor = 3
        elevator.direction = 1
        for floor in (2, 5, 8):
            elevator.request_pickup(floor)

        assert system.calculate_next_elevator_target(elevator) == 5
        assert elevator.state == ElevatorState.MOVING_UP

    def test_parks_when_nothing_is_pending(self, make_system):
        system = make_system(10, [1000.0])
        elevator = system.elevators[0]
        assert system.calculate_next_elevator_target(elevator) is None
        assert elevator.target_floor == 0
        assert elevator.state == ElevatorState.IDLE_CLOSED


class TestContracts:
    def test_null_elevator_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        with pytest.raises(ContractViolation):
            system.process_floor_arrival(3, None)

    def test_zero_target_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        with pytest.raises(ContractViolation):
            system.assign_call(system.elevators[0], 0)

    def test_foreign_elevator_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        stranger = Elevator(elevator_id=1, max_load=1000.0, floors_count=5)
        with pytest.raises(ContractViolation):
            system.process_floor_arrival(2, stranger)

    def test_floor_outside_building_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        with pytest.raises(ContractViolation):
            system.process_floor_arrival(6, system.elevators[0])

    def test_passenger_outside_building_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        with pytest.raises(ScheduleError):
            system.add_passenger(rider(1, 0, 1, 9))

    def test_passenger_without_a_trip_is_rejected(self, make_system):
        system = make_system(5, [1000.0])
        with pytest.raises(ScheduleError):
            system.add_passenger(rider(1, 0, 2, 2))
        assert system.remaining_passengers == 0

    def test_passenger_heavier_than_every_elevator_is_rejected(self, make_system):
        system = make_system(5, [100.0, 150.0])
        with pytest.raises(ScheduleError):
            system.add_passenger(rider(1, 0, 1, 3, 151.0))
        assert system.add_passenger(rider(2, 0, 1, 3, 150.0))

    def test_undeliverable_passenger_is_rejected_at_construction(self):
        config = BuildingConfig(floors_count=5, max_loads=[1000.0])
        with pytest.raises(ScheduleError):
            ElevatorSystem.from_config(config, [rider(1, 0, 4, 4)])

    def test_duplicate_passenger_is_ignored(self, make_system):
        system = make_system(5, [1000.0])
        assert system.add_passenger(rider(1, 0, 1, 3, 70.0))
        assert not system.add_passenger(rider(1, 4, 2, 5, 90.0))
        assert system.passengers[1].weight == 70.0
        assert system.remaining_passengers == 1


def test_from_config_uses_elevator_order_for_ids():
    config = BuildingConfig(floors_count=4, max_loads=[300.0, 500.0])
    system = ElevatorSystem.from_config(config)
    assert [e.elevator_id for e in system.elevators] == [1, 2]
    assert [e.max_load for e in system.elevators] == [300.0, 500.0]
