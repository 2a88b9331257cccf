import pytest

from campus2prolog.core.result import FailureType
from campus2prolog.domain.model import Building
from campus2prolog.repos.loader import FacilityLoader
from campus2prolog.repos.memory import MemoryFloorRepo, Repositories
from campus2prolog.services.floor_map import ConnectionType, FloorMapGenerator, passage_direction


def _generator(repos):
    return FloorMapGenerator(repos.floors, repos.rooms, repos.elevators, repos.passages)


def _single_floor(length, width, rooms=()):
    data = {
        "buildings": [{"id": "b", "code": "C", "dimensions": {"length": length, "width": width}}],
        "floors": [{"id": "f", "building": "b", "number": 1}],
        "rooms": list(rooms),
    }
    return Repositories.from_facility(FacilityLoader.from_dict(data))


class TestOutlineAndRooms:
    def test_empty_floor_outline(self):
        floor_map = _generator(_single_floor(2, 3)).get_floor_map("C", 1).value

        assert floor_map.map == [
            [3, 2, 2, 1],
            [1, 0, 0, 1],
            [2, 2, 2, 0],
        ]
        assert floor_map.connections == []
        assert floor_map.floor_elements == []

    def test_room_walls_and_door(self):
        room = {
            "id": "R1",
            "floor": "f",
            "initial_position": [0, 0],
            "final_position": [1, 1],
            "door_position": [1, 1],
            "door_orientation": "SOUTH",
        }
        floor_map = _generator(_single_floor(3, 3, [room])).get_floor_map("C", 1).value

        assert floor_map.map == [
            [3, 2, 3, 1],
            [1, 0, 1, 1],
            [3, 5, 0, 1],
            [2, 2, 2, 0],
        ]
        assert [e.to_dict() for e in floor_map.floor_elements] == [
            {"initCoords": [1, 2], "finalCoords": [1, 2], "displayName": "R1"}
        ]

    def test_room_outside_floor_is_clipped(self):
        room = {
            "id": "R1",
            "floor": "f",
            "initial_position": [1, 1],
            "final_position": [4, 4],
            "door_position": [1, 1],
            "door_orientation": "NORTH",
        }
        result = _generator(_single_floor(2, 2, [room])).get_floor_map("C", 1)

        assert not result.is_failure
        assert len(result.value.map) == 3
        assert all(len(row) == 3 for row in result.value.map)


class TestFixtureFloors:
    def test_ground_floor_of_main_building(self, repos):
        floor_map = _generator(repos).get_floor_map("A", 1).value

        assert (floor_map.width, floor_map.length) == (6, 5)
        assert len(floor_map.map) == 6
        assert all(len(row) == 7 for row in floor_map.map)
        assert floor_map.map[2][1] == 5  # A101 door, south wall
        assert floor_map.map[1][3] == 4  # A102 door, west wall
        assert floor_map.map[4][5] == 9  # elevator facing west
        assert floor_map.map[4][0] == 15
        assert floor_map.map[3][0] == 14

        assert [e.to_dict() for e in floor_map.floor_elements] == [
            {"initCoords": [1, 2], "finalCoords": [1, 2], "displayName": "A101"},
            {"initCoords": [3, 1], "finalCoords": [3, 1], "displayName": "A102"},
            {"initCoords": [5, 4], "finalCoords": [5, 4], "displayName": "1"},
            {"initCoords": [0, 4], "finalCoords": [0, 3], "displayName": ""},
        ]

        elevator, first, last = [c.to_dict() for c in floor_map.connections]
        assert elevator == {
            "connectionType": "elevator",
            "connectionCoords": [5, 4],
            "destFloorId": {2: "A"},
            "destFloorInitiCoords": [5, 4],
            "destFloorInitiDirection": 270,
        }
        assert first == {
            "connectionType": "passage",
            "connectionCoords": [0, 4],
            "destFloorId": {1: "B"},
            "destFloorInitiCoords": [3, 2],
            "destFloorInitiDirection": 270,
        }
        assert first["connectionCoords"] != last["connectionCoords"]
        assert last["destFloorInitiCoords"] == [3, 3]

    def test_passage_seen_from_the_other_end(self, repos):
        floor_map = _generator(repos).get_floor_map("B", 1).value

        assert len(floor_map.map) == 5
        assert floor_map.map[2][4] == 16
        assert floor_map.map[3][4] == 17
        # door is written after the corner of the same cell
        assert floor_map.map[2][0] == 5

        passages = [c for c in floor_map.connections if c.connection_type is ConnectionType.PASSAGE]
        assert [(c.coords, c.destination_coords) for c in passages] == [
            ((3, 2), (0, 4)),
            ((3, 3), (0, 3)),
        ]
        assert all(c.destination_floors == {1: "A"} for c in passages)
        assert all(c.destination_direction == 90 for c in passages)

    def test_upper_floor_elevator_leads_down(self, repos):
        floor_map = _generator(repos).get_floor_map("A", 2).value

        assert [c.destination_floors for c in floor_map.connections] == [{1: "A"}]
        assert floor_map.map[1][3] == 4  # A201 door, east wall


class TestFailures:
    def test_unknown_floor(self, repos):
        result = _generator(repos).get_floor_map("Z", 9)

        assert result.failure_type is FailureType.ENTITY_DOES_NOT_EXIST
        assert result.error == "Floor with number 9 does not exist in building with code Z"

    def test_repo_exception_is_database_error(self, repos):
        class Broken(MemoryFloorRepo):
            def find_by_building_code_and_number(self, building_code, number):
                raise RuntimeError("db down")

        generator = FloorMapGenerator(Broken(), repos.rooms, repos.elevators, repos.passages)
        result = generator.get_floor_map("A", 1)

        assert result.failure_type is FailureType.DATABASE_ERROR
        assert result.error == "db down"


BUILDING = Building(building_id="b", code="b", dimensions=(4, 6))


@pytest.mark.parametrize(
    "first, last, expected",
    [
        ((0, 1), (0, 2), 90),
        ((2, 0), (3, 0), 0),
        ((5, 1), (5, 2), 270),
        ((1, 3), (2, 3), 180),
        ((2, 2), (2, 3), None),
    ],
)
def test_passage_direction(first, last, expected):
    assert passage_direction(first, last, BUILDING) == expected
