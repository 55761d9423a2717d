"""Classes imported by generated adapters under test."""

from __future__ import annotations

from typing import Any


class Gear:
    pass


class Knob:
    pass


class Widget:
    knob: Knob

    def __init__(self, gear: Gear) -> None:
        self.gear = gear


class Dial:
    # Constructor parameter and field share the name ``knob``.
    knob: Knob

    def __init__(self, knob: Knob, gear: Gear) -> None:
        self.constructor_arguments = (knob, gear)


class Sensor:
    knob: Knob


class Machine:
    gear: Gear


class Lathe(Machine):
    knob: Knob


class Registry:
    default_gear: Any = None


class Outer:
    class Inner:
        def __init__(self, gear: Gear) -> None:
            self.gear = gear


class Binding:
    """Shares its name with the runtime base class imported by generated modules."""

    def __init__(self, gear: Gear) -> None:
        self.gear = gear
