"""
Command-line interface for spur gear generation.
"""

import argparse
import logging
import sys
from pathlib import Path

from .. import __version__
from ..calculator import (
    design_from_parameters,
    validate_parameters,
    to_markdown,
    to_summary,
)
from ..core.gear import GearGeometry
from ..enums import CutStrategy
from ..errors import SpurGearError
from ..io.loaders import GearParameters, load_design_json, save_design_json
from ..io.stl import DEFAULT_FILENAME, DEFAULT_SOLID_NAME

DEFAULTS = GearParameters()


def _configure_logging(verbosity: int):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _resolve_parameters(args) -> GearParameters:
    """Parameters from --design (if any), overridden by explicit flags."""
    if args.design:
        print(f"Loading design from {args.design}...")
        base = load_design_json(args.design).parameters
    else:
        base = DEFAULTS

    overrides = {
        'teeth': args.teeth,
        'module_mm': args.module,
        'pressure_angle_deg': args.pressure_angle,
        'thickness_mm': args.thickness,
    }
    values = base.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return GearParameters(**values)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Generate a spur gear and export it as an ASCII STL file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Default gear: 12 teeth, module 1, 20° pressure angle, 2 mm thick -> gear.stl
  spurgear-generate

  # Larger gear with a custom file name
  spurgear-generate --teeth 24 --module 1.5 --thickness 5 -o gear24.stl

  # Parameters from a saved design, print a summary
  spurgear-generate --design design.json --summary

  # Check parameters without generating anything
  spurgear-generate --teeth 4 --validate-only

  # Merge all cutters first (faster for many teeth), give up after 60 s
  spurgear-generate --teeth 80 --strategy compound --timeout 60

  # Save the design for reproducibility
  spurgear-generate --teeth 30 --save-json design.json --markdown design.md
        """
    )

    parser.add_argument(
        '--teeth',
        type=int,
        default=None,
        help=f'Number of teeth (default: {DEFAULTS.teeth})'
    )

    parser.add_argument(
        '--module',
        type=float,
        default=None,
        help=f'Module in mm (default: {DEFAULTS.module_mm})'
    )

    parser.add_argument(
        '--pressure-angle',
        type=float,
        default=None,
        help=f'Pressure angle in degrees (default: {DEFAULTS.pressure_angle_deg})'
    )

    parser.add_argument(
        '--thickness',
        type=float,
        default=None,
        help=f'Gear thickness in mm (default: {DEFAULTS.thickness_mm})'
    )

    parser.add_argument(
        '--design',
        type=str,
        default=None,
        help='Load parameters from a design JSON file (flags above override it)'
    )

    parser.add_argument(
        '-o', '--output',
        type=str,
        default=DEFAULT_FILENAME,
        help=f'Output STL file (default: {DEFAULT_FILENAME})'
    )

    parser.add_argument(
        '--solid-name',
        type=str,
        default=DEFAULT_SOLID_NAME,
        help=f'Solid name written into the STL (default: {DEFAULT_SOLID_NAME})'
    )

    parser.add_argument(
        '--strategy',
        type=str,
        choices=[s.value for s in CutStrategy],
        default=CutStrategy.SEQUENTIAL.value,
        help='Tooth cutting strategy (default: sequential)'
    )

    parser.add_argument(
        '--timeout',
        type=float,
        default=None,
        help='Abort generation after this many seconds'
    )

    parser.add_argument(
        '--precision',
        type=int,
        default=None,
        help='Significant digits for STL numbers (default: exact round-trip)'
    )

    parser.add_argument(
        '--save-json',
        type=str,
        default=None,
        help='Save the design (parameters and dimensions) as JSON'
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print a design summary'
    )

    parser.add_argument(
        '--markdown',
        type=str,
        default=None,
        help='Write a markdown design specification to this file'
    )

    parser.add_argument(
        '--validate-only',
        action='store_true',
        help='Validate parameters and exit without generating'
    )

    parser.add_argument(
        '--no-save',
        action='store_true',
        help='Generate but do not write the STL file'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Show progress logging (-vv for debug output)'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    # Resolve parameters
    try:
        params = _resolve_parameters(args)
    except Exception as e:
        print(f"Error loading design: {e}", file=sys.stderr)
        return 1

    validation = validate_parameters(params)

    for msg in validation.errors:
        print(f"ERROR {msg.code}: {msg.message}", file=sys.stderr)
    for msg in validation.warnings:
        print(f"WARNING {msg.code}: {msg.message}")
        if msg.suggestion:
            print(f"  Suggestion: {msg.suggestion}")

    if not validation.valid:
        return 1

    # Dimensions are only defined for parameters that passed validation
    design = design_from_parameters(params=params)

    if args.summary:
        print(to_summary(design, validation))

    if args.validate_only:
        print("Parameters are valid")
        return 0

    # Generate
    print(f"\nGenerating gear ({params.teeth} teeth, module {params.module_mm}mm, "
          f"{params.thickness_mm}mm thick, {args.strategy} cutting)...")

    gear = GearGeometry(
        params,
        strategy=CutStrategy(args.strategy),
        timeout_s=args.timeout,
    )
    try:
        mesh = gear.build()
    except SpurGearError as e:
        print(f"Error generating gear: {e}", file=sys.stderr)
        return 1

    print(f"  Triangles: {len(mesh)}")
    print(f"  Volume: {mesh.volume():.2f} mm³")

    # Save outputs
    try:
        if not args.no_save:
            output_file = gear.export_stl(args.output, solid_name=args.solid_name,
                                          precision=args.precision)
            print(f"  Saved: {output_file}")

        if args.save_json:
            output_path = Path(args.save_json)
            save_design_json(design, output_path)
            print(f"  Saved design JSON: {output_path}")

        if args.markdown:
            output_path = Path(args.markdown)
            output_path.write_text(to_markdown(design, validation))
            print(f"  Saved markdown: {output_path}")
    except (OSError, ValueError) as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
