from __future__ import annotations

import asyncio
import itertools
from collections import OrderedDict
from dataclasses import asdict

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from simulation import ElevatorSystem, LiftLogicError, SimulationOptions
from simulation.loader import parse_building_config, parse_schedule
from simulation.reports import format_elevator_report, format_passenger_report

MAX_RETAINED_RUNS = 100


class SimulationRequest(BaseModel):
    building: str = Field(..., description="Contents of a building configuration file")
    schedule: str = Field("", description="Contents of a passenger schedule file")
    starting_floor: int = 1


class SimulationManager:
    """Runs submitted schedules to completion and keeps the latest results in memory."""

    def __init__(self, max_runs: int = MAX_RETAINED_RUNS) -> None:
        self.runs: "OrderedDict[int, ElevatorSystem]" = OrderedDict()
        self.max_runs = max_runs
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def submit(self, request: SimulationRequest) -> dict:
        config = parse_building_config(request.building)
        passengers = parse_schedule(request.schedule, config)
        options = SimulationOptions(starting_floor=request.starting_floor)
        system = ElevatorSystem.from_config(config, passengers, options=options)
        loop = asyncio.get_running_loop()
        async with self._lock:
            await loop.run_in_executor(None, system.run)
            run_id = next(self._ids)
            self.runs[run_id] = system
            while len(self.runs) > self.max_runs:
                self.runs.popitem(last=False)
        return self.summary(run_id)

    def get(self, run_id: int) -> ElevatorSystem:
        system = self.runs.get(run_id)
        if system is None:
            raise KeyError(run_id)
        return system

    def summary(self, run_id: int) -> dict:
        system = self.get(run_id)
        return {
            "id": run_id,
            "ticks": system.current_time,
            "passengers": len(system.passengers),
            "delivered": len(system.delivered()),
            "elevators": [
                {
                    "id": elevator.elevator_id,
                    "floor": elevator.current_floor,
                    "state": elevator.state.value,
                    "idle_time": elevator.stats.idle_ticks,
                    "moving_time": system.current_time - elevator.stats.idle_ticks,
                    **{key: value for key, value in asdict(elevator.stats).items() if key != "idle_ticks"},
                }
                for elevator in system.elevators
            ],
        }


manager = SimulationManager()
app = FastAPI(title="LiftLogic Simulation API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _lookup(run_id: int) -> ElevatorSystem:
    try:
        return manager.get(run_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown simulation {run_id}")


@app.post("/simulations")
async def create_simulation(request: SimulationRequest) -> dict:
    try:
        return await manager.submit(request)
    except LiftLogicError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.get("/simulations/{run_id}")
async def get_simulation(run_id: int) -> dict:
    _lookup(run_id)
    return manager.summary(run_id)


@app.get("/simulations/{run_id}/reports/passengers", response_class=PlainTextResponse)
async def passenger_report(run_id: int) -> str:
    system = _lookup(run_id)
    return format_passenger_report(system.passengers.values())


@app.get("/simulations/{run_id}/reports/elevators", response_class=PlainTextResponse)
async def elevator_report(run_id: int) -> str:
    system = _lookup(run_id)
    return format_elevator_report(system.elevators, system.current_time)


def main(host: str = "0.0.0.0", port: int = 8000) -> None:
    import uvicorn

    uvicorn.run("server.app:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
