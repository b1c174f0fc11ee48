"""Named colour palettes for NDVI visualisation.

The table is read-only: palettes are tuples inside a ``MappingProxyType``
so that a lookup can never alter what the next caller sees. The active
palette is chosen by name through ``AnalysisConfig.palette``.
"""

from __future__ import annotations

from types import MappingProxyType


class UnknownPaletteError(KeyError):
    """Raised when a palette name is not in the table."""

    def __init__(self, name: str) -> None:
        self.name = name
        available = ", ".join(sorted(PALETTES))
        super().__init__(f"Unknown palette {name!r}. Available: {available}")

    def __str__(self) -> str:
        return str(self.args[0])


PALETTES: MappingProxyType[str, tuple[str, ...]] = MappingProxyType(
    {
        "default": ("blue", "white", "green"),
        "ndvi": ("640000", "ff0000", "ffff00", "00c800", "006400"),
        "ndvi1": ("306466", "9cab68", "cccc66", "9c8448", "6e462c"),
        # min: -0.2, max: 0.8
        "ndvi2": ("8bc4f9", "c9995c", "c7d270", "8add60", "097210"),
        # Contrast palette #1 (agromonitoring paletteid=3); min: -0.2, max: 0.8
        "ndviAgro": (
            "d7d7d7",
            "d5d5d5",
            "d2d2d2",
            "c7c7c7",
            "a70204",
            "e50004",
            "fb6300",
            "ffb001",
            "f5e702",
            "c2e100",
            "81cd00",
            "5cbe02",
            "46a703",
            "36a801",
            "209e01",
            "029302",
            "008900",
            "027e02",
            "047101",
            "006400",
        ),
        # min: 0.5, max: 1
        "green": (
            "FFFFFF",
            "CE7E45",
            "DF923D",
            "F1B555",
            "FCD163",
            "99B718",
            "74A901",
            "66A000",
            "529400",
            "3E8601",
            "207401",
            "056201",
            "004C00",
            "023B01",
            "012E01",
            "011D01",
            "011301",
        ),
        "redToGreen": ("ff0000", "ffff00", "00ff00"),
        "mosaic": ("00FFFF", "0000FF"),
    }
)


def get_palette(name: str) -> tuple[str, ...]:
    """Return the colour ramp registered under *name*.

    Raises:
        UnknownPaletteError: If *name* is not a known palette.
    """
    try:
        return PALETTES[name]
    except KeyError:
        raise UnknownPaletteError(name) from None


def list_palettes() -> list[str]:
    """Return the names of all known palettes."""
    return sorted(PALETTES)
