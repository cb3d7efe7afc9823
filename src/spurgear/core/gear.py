"""
Spur gear solid generation.

Builds a gear by cutting tooth gaps out of a cylindrical blank:

1. The blank is a faceted cylinder of the outer radius, two facets per tooth.
2. One square cutter per tooth sits on the pitch circle, turned to face the
   gear axis, and overshoots both faces of the blank.
3. The cutters are subtracted in increasing angle order (SEQUENTIAL), or
   merged first and subtracted once (COMPOUND).

The teeth left standing between the gaps are rectangular; the pressure
angle only enters through the base radius reported by the calculator.
"""

import logging
import time
from dataclasses import dataclass
from math import pi, cos, sin
from typing import Callable, Optional

from ..calculator.core import calculate_gear
from ..calculator.validation import ensure_valid
from ..enums import CutStrategy
from ..errors import GenerationCancelledError
from ..io.loaders import GearParameters
from .csg import subtract, union
from .geometry_base import BaseGeometry
from .mesh import Mesh, Transform, Vec3
from .primitives import make_box, make_cylinder

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]


@dataclass(frozen=True)
class DisplayMaterial:
    """Surface appearance handed to the renderer (physically based shading)."""
    color: str = "silver"
    metalness: float = 0.0
    roughness: float = 1.0


@dataclass(frozen=True)
class RenderPayload:
    """Everything a renderer needs to show a generated gear."""
    mesh: Mesh
    material: DisplayMaterial
    camera_position: Vec3 = (10.0, 10.0, 10.0)


class GearGeometry(BaseGeometry):
    """
    Generates a spur gear mesh from GearParameters.

    Parameters are validated when the geometry is built, before any mesh
    work starts.  The built mesh is cached; building twice returns the same
    mesh.
    """

    _part_name = "gear"

    def __init__(
        self,
        params: GearParameters,
        strategy: CutStrategy = CutStrategy.SEQUENTIAL,
        timeout_s: Optional[float] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[ProgressCallback] = None,
        material: Optional[DisplayMaterial] = None,
    ):
        """
        Initialize gear geometry generator.

        Args:
            params: Gear parameters
            strategy: SEQUENTIAL subtracts one cutter at a time; COMPOUND
                      merges all cutters and subtracts once
            timeout_s: Give up with GenerationCancelledError after this many
                       seconds (checked between boolean operations)
            should_cancel: Polled between boolean operations; returning True
                           aborts with GenerationCancelledError
            progress_callback: Optional callback function(message, percent)
            material: Display material for render_payload()
        """
        self.params = params
        self.strategy = CutStrategy(strategy)
        self.timeout_s = timeout_s
        self.should_cancel = should_cancel
        self.progress_callback = progress_callback
        self.material = material if material is not None else DisplayMaterial()

        # Cache for built geometry (avoids rebuilding on export)
        self._mesh = None
        self._started = None

    def build(self) -> Mesh:
        """
        Build the gear mesh.

        Returns:
            Closed triangle mesh of the gear

        Raises:
            InvalidParametersError: If the parameters fail validation
            GenerationCancelledError: On cancellation or timeout
            DegenerateBooleanError: If a boolean operation fails
        """
        if self._mesh is not None:
            return self._mesh

        ensure_valid(self.params)
        dims = calculate_gear(self.params)
        self._started = time.monotonic()

        logger.info(f"Building gear: {self.params.teeth} teeth, module {self.params.module_mm}mm, "
                    f"{self.strategy.value} cutting")

        blank = make_cylinder(dims.outer_radius_mm, self.params.thickness_mm, dims.blank_segments)
        logger.debug(f"Blank: radius={dims.outer_radius_mm:.2f}mm, "
                     f"height={self.params.thickness_mm:.2f}mm, {len(blank)} triangles")

        cutter = make_box(dims.cutter_size_mm, dims.cutter_size_mm, dims.cutter_height_mm)
        placements = [self._cutter_placement(i, dims.pitch_radius_mm)
                      for i in range(self.params.teeth)]

        if self.strategy == CutStrategy.COMPOUND:
            gear = self._cut_compound(blank, cutter, placements)
        else:
            gear = self._cut_sequential(blank, cutter, placements)

        self._report_progress("Gear complete", 100.0)
        logger.info(f"Gear built: {len(gear)} triangles, volume={gear.volume():.2f} mm³ "
                    f"in {time.monotonic() - self._started:.2f}s")

        self._mesh = gear
        return self._mesh

    def _cutter_placement(self, index: int, pitch_radius: float) -> Transform:
        """Turn the cutter to face the axis, then move it onto the pitch circle."""
        angle = 2 * pi * index / self.params.teeth
        return Transform.rotation_z(angle).then(
            Transform.from_translation(pitch_radius * cos(angle), pitch_radius * sin(angle), 0)
        )

    def _cut_sequential(self, blank: Mesh, cutter: Mesh, placements) -> Mesh:
        gear = blank
        count = len(placements)
        for i, placement in enumerate(placements):
            self._check_cancelled()
            gear = subtract(gear, cutter, placement)
            logger.debug(f"Tooth gap {i + 1}/{count}: {len(gear)} triangles")
            self._report_progress(f"Cut {i + 1}/{count} tooth gaps", 100.0 * (i + 1) / count)
        return gear

    def _cut_compound(self, blank: Mesh, cutter: Mesh, placements) -> Mesh:
        tool = Mesh()
        count = len(placements)
        for i, placement in enumerate(placements):
            self._check_cancelled()
            tool = union(tool, cutter, placement)
            # Merging is most of the work; the final cut takes the last 10%
            self._report_progress(f"Merged {i + 1}/{count} cutters", 90.0 * (i + 1) / count)
        logger.debug(f"Compound cutter: {len(tool)} triangles")

        self._check_cancelled()
        return subtract(blank, tool)

    def _check_cancelled(self):
        if self.should_cancel is not None and self.should_cancel():
            raise GenerationCancelledError("Gear generation cancelled")
        if self.timeout_s is not None:
            elapsed = time.monotonic() - self._started
            if elapsed > self.timeout_s:
                raise GenerationCancelledError(
                    f"Gear generation timed out after {elapsed:.1f}s (limit {self.timeout_s}s)"
                )

    def _report_progress(self, message: str, percent: float):
        """Report progress via callback if available."""
        logger.debug(message)
        if self.progress_callback:
            try:
                self.progress_callback(message, percent)
            except Exception as e:
                logger.warning(f"Progress callback failed: {e}")

    def render_payload(self) -> RenderPayload:
        """Mesh plus display material for the renderer (builds if needed)."""
        return RenderPayload(mesh=self.build(), material=self.material)


def generate_gear(
    params: GearParameters,
    strategy: CutStrategy = CutStrategy.SEQUENTIAL,
    **options,
) -> Mesh:
    """
    Generate a gear mesh from parameters.

    Each call builds a fresh mesh; nothing is shared between calls.

    Args:
        params: Gear parameters
        strategy: Cutting strategy
        **options: Further GearGeometry options (timeout_s, should_cancel,
                   progress_callback)
    """
    return GearGeometry(params, strategy=strategy, **options).build()


def generate(
    teeth: int = 12,
    module: float = 1.0,
    pressure_angle: float = 20.0,
    thickness: float = 2.0,
) -> Mesh:
    """
    Generate a gear mesh from the four raw inputs.

    Example:
        >>> mesh = generate(teeth=12, module=1.0, pressure_angle=20.0, thickness=2.0)
        >>> len(mesh.positions()) % 9
        0
    """
    params = GearParameters(
        teeth=teeth,
        module_mm=module,
        pressure_angle_deg=pressure_angle,
        thickness_mm=thickness,
    )
    return generate_gear(params)
