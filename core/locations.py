"""
Location snapshots used for pickup and delivery points.

A point without coordinates is an ``UnknownLocation`` rather than a
made-up coordinate, so map and routing consumers have to handle it.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    name: str = ''

    known = True

    def as_dict(self):
        return {
            'known': True,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'name': self.name,
        }


@dataclass(frozen=True)
class UnknownLocation:
    name: str = ''

    known = False
    latitude = None
    longitude = None

    def as_dict(self):
        return {'known': False, 'latitude': None, 'longitude': None, 'name': self.name}


AnyLocation = Union[Location, UnknownLocation]


def _to_float(value) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None


def location_from(latitude, longitude, name='') -> AnyLocation:
    """Build a ``Location`` when both coordinates parse, else ``UnknownLocation``."""
    lat = _to_float(latitude)
    lng = _to_float(longitude)
    if lat is None or lng is None:
        return UnknownLocation(name=name or '')
    return Location(latitude=lat, longitude=lng, name=name or '')
