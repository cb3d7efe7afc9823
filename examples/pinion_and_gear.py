"""
Generate a matching pinion and gear (module 1.5, ratio 1:3).

Writes both STL files plus a design JSON for each part.
"""

from spurgear import GearGeometry, GearParameters, CutStrategy
from spurgear.calculator import design_from_parameters, to_summary, validate_parameters
from spurgear.io import save_design_json

print("=" * 70)
print("SPUR GEAR PAIR GENERATION")
print("=" * 70)
print()

parts = {
    "pinion": GearParameters(teeth=12, module_mm=1.5, thickness_mm=5.0),
    "gear": GearParameters(teeth=36, module_mm=1.5, thickness_mm=5.0),
}

for name, params in parts.items():
    design = design_from_parameters(params=params)
    print(to_summary(design, validate_parameters(params)))
    print()

    def progress(message, percent):
        print(f"  [{percent:5.1f}%] {message}")

    print(f"Generating {name}...")
    geometry = GearGeometry(params, strategy=CutStrategy.COMPOUND, progress_callback=progress)
    geometry.export_stl(f"{name}.stl", solid_name=name)
    save_design_json(design, f"{name}.json")
    print(f"  Saved: {name}.stl, {name}.json")
    print()

center_distance = (parts["pinion"].teeth + parts["gear"].teeth) * 1.5 / 2
print(f"Center distance: {center_distance:.2f} mm")
