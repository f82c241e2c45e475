"""
Station Matcher Domain Service

Best-effort association of line stations to planning machines. Stations and
machines live in different tables with no foreign key between them, so the
association is a heuristic, not a join.
"""

from collections.abc import Sequence

from ..entities.line_overview import MachineInfo
from ..entities.reference import Station


class StationMatcher:
    """
    Match stations to machines by code, then by name.

    Precedence is strict: every machine is first offered to the code pass over
    all stations; only machines left unmatched go through the
    case-insensitive name pass. Within a pass the first station in list order
    wins.
    """

    @staticmethod
    def match_by_code(
        stations: Sequence[Station], machines: Sequence[MachineInfo]
    ) -> dict[str, str]:
        matches: dict[str, str] = {}
        for machine in machines:
            if not machine.machine_code:
                continue
            for station in stations:
                if station.code and station.code == machine.machine_code:
                    matches[machine.machine_code] = station.id
                    break
        return matches

    @staticmethod
    def match_by_name(
        stations: Sequence[Station], machines: Sequence[MachineInfo]
    ) -> dict[str, str]:
        matches: dict[str, str] = {}
        for machine in machines:
            machine_name = (machine.machine_name or "").lower()
            if not machine_name:
                continue
            for station in stations:
                station_name = (station.name or "").lower()
                if station_name and station_name == machine_name:
                    matches[machine.machine_code] = station.id
                    break
        return matches

    @classmethod
    def match(
        cls, stations: Sequence[Station], machines: Sequence[MachineInfo]
    ) -> dict[str, str | None]:
        """
        Associate each machine code with a station id, or None.

        Args:
            stations: Stations of the line
            machines: Machines of the line

        Returns:
            Mapping with one entry per machine code
        """
        by_code = cls.match_by_code(stations, machines)
        unmatched = [m for m in machines if m.machine_code not in by_code]
        by_name = cls.match_by_name(stations, unmatched)

        return {
            m.machine_code: by_code.get(m.machine_code) or by_name.get(m.machine_code)
            for m in machines
        }


def match_stations_to_machines(
    stations: Sequence[Station], machines: Sequence[MachineInfo]
) -> dict[str, str | None]:
    return StationMatcher.match(stations, machines)
