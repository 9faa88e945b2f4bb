"""Database operations for sensordb."""

from . import create
from . import delete
from . import seed
from . import generate
from . import insert
from . import read

__all__ = [
    "create",
    "delete",
    "seed",
    "generate",
    "insert",
    "read",
]
