"""
Base class for spurgear geometry classes.

Provides the shared export methods used by GearGeometry.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class BaseGeometry:
    """Base class providing shared export methods for geometry classes.

    Subclasses must:
    - Set self._mesh = None in __init__
    - Implement build() -> Mesh
    - Set _part_name class attribute for log messages
    """

    _part_name: str = "part"

    def export_stl(self, filepath: str = "gear.stl", solid_name: Optional[str] = None,
                   precision: Optional[int] = None):
        """Export to ASCII STL file (builds if not already built)."""
        from ..io.stl import write_stl

        if self._mesh is None:
            self.build()

        logger.info(f"Exporting {self._part_name}: {len(self._mesh)} triangles, "
                    f"volume={self._mesh.volume():.2f} mm³")
        return write_stl(
            self._mesh,
            filepath,
            solid_name=solid_name or self._part_name,
            precision=precision,
        )

    def to_solid_text(self, solid_name: Optional[str] = None,
                      precision: Optional[int] = None) -> str:
        """ASCII STL text for the built mesh (builds if not already built)."""
        from ..io.stl import to_solid_text

        if self._mesh is None:
            self.build()

        return to_solid_text(self._mesh, solid_name=solid_name or self._part_name,
                             precision=precision)
